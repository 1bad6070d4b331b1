from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from .errors import TemplateRejected
from .prompts import BASE_PROMPT, project_context_prompt

TEMPLATE_KINDS = ("node", "react")

NODE_BASE_ARTIFACT = """\
<boltArtifact id="project-import" title="Project Files">
<boltAction type="file" filePath="index.js">
// run `node index.js` in the terminal

console.log(`Hello Node.js v${process.versions.node}!`);
</boltAction>
<boltAction type="file" filePath="package.json">
{
  "name": "node-starter",
  "private": true,
  "scripts": {
    "test": "echo \\"Error: no test specified\\" && exit 1"
  }
}
</boltAction>
</boltArtifact>
"""

REACT_BASE_ARTIFACT = """\
<boltArtifact id="project-import" title="Project Files">
<boltAction type="file" filePath="index.html">
<!doctype html>
<html lang="en">
  <head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>Vite + React + TS</title>
  </head>
  <body>
    <div id="root"></div>
    <script type="module" src="/src/main.tsx"></script>
  </body>
</html>
</boltAction>
<boltAction type="file" filePath="package.json">
{
  "name": "vite-react-typescript-starter",
  "private": true,
  "version": "0.0.0",
  "type": "module",
  "scripts": {
    "dev": "vite",
    "build": "vite build",
    "preview": "vite preview"
  },
  "dependencies": {
    "lucide-react": "^0.344.0",
    "react": "^18.3.1",
    "react-dom": "^18.3.1"
  },
  "devDependencies": {
    "@vitejs/plugin-react": "^4.3.1",
    "autoprefixer": "^10.4.18",
    "postcss": "^8.4.35",
    "tailwindcss": "^3.4.1",
    "typescript": "^5.5.3",
    "vite": "^5.4.2"
  }
}
</boltAction>
<boltAction type="file" filePath="vite.config.ts">
import { defineConfig } from 'vite';
import react from '@vitejs/plugin-react';

export default defineConfig({
  plugins: [react()],
  optimizeDeps: {
    exclude: ['lucide-react'],
  },
});
</boltAction>
<boltAction type="file" filePath="tailwind.config.js">
/** @type {import('tailwindcss').Config} */
export default {
  content: ['./index.html', './src/**/*.{js,ts,jsx,tsx}'],
  theme: {
    extend: {},
  },
  plugins: [],
};
</boltAction>
<boltAction type="file" filePath="src/main.tsx">
import { StrictMode } from 'react';
import { createRoot } from 'react-dom/client';
import App from './App.tsx';
import './index.css';

createRoot(document.getElementById('root')!).render(
  <StrictMode>
    <App />
  </StrictMode>
);
</boltAction>
<boltAction type="file" filePath="src/App.tsx">
function App() {
  return (
    <div className="min-h-screen bg-gray-100 flex items-center justify-center">
      <p>Start prompting (or editing) to see magic happen :)</p>
    </div>
  );
}

export default App;
</boltAction>
<boltAction type="file" filePath="src/index.css">
@tailwind base;
@tailwind components;
@tailwind utilities;
</boltAction>
</boltArtifact>
"""

_BASE_ARTIFACTS: Dict[str, str] = {
    "node": NODE_BASE_ARTIFACT,
    "react": REACT_BASE_ARTIFACT,
}


@dataclass
class TemplatePrompts:
    prompts: List[str]
    ui_prompts: List[str]


def template_prompts(kind: str) -> TemplatePrompts:
    artifact = _BASE_ARTIFACTS.get(kind)
    if artifact is None:
        raise TemplateRejected(kind)
    if kind == "react":
        return TemplatePrompts(
            prompts=[BASE_PROMPT, project_context_prompt(artifact)],
            ui_prompts=[artifact],
        )
    return TemplatePrompts(prompts=[project_context_prompt(artifact)], ui_prompts=[artifact])
