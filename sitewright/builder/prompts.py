from __future__ import annotations

CLASSIFY_PROMPT = (
    "Return either node or react based on what do you think the project should be. "
    "Only return a single word either 'node' or 'react'. Do not return anything extra."
)

BASE_PROMPT = (
    "For all designs I ask you to make, have them be beautiful, not cookie cutter. "
    "Make webpages that are fully featured and worthy for production.\n\n"
    "By default, this template supports JSX syntax with Tailwind CSS classes, React hooks, "
    "and Lucide React for icons. Do not install other packages for UI themes, icons, etc "
    "unless absolutely necessary or I request them.\n\n"
    "Use icons from lucide-react for logos.\n\n"
    "Use stock photos from unsplash where appropriate, only valid URLs you know exist. "
    "Do not download the images, only link to them in image tags.\n\n"
)

_ARTIFACT_INSTRUCTIONS = """\
You are an expert AI assistant and exceptional senior software developer with
vast knowledge across multiple programming languages, frameworks, and best
practices.

Answer with exactly one artifact for the whole project:

<boltArtifact id="kebab-case-id" title="Short project title">
  <boltAction type="file" filePath="relative/path.ext">
    full file contents
  </boltAction>
  <boltAction type="shell">
    command to run
  </boltAction>
</boltArtifact>

Rules:
- Always write the complete contents of every file, never placeholders.
- File paths are relative to the project root and use forward slashes.
- Install dependencies with a shell action before running anything.
- Order actions so that a file is written before a command that needs it.
- Do not explain the artifact before or after it.
"""


def system_prompt() -> str:
    return _ARTIFACT_INSTRUCTIONS


def project_context_prompt(base_artifact: str) -> str:
    out = ""
    out += "Here is an artifact that contains all files of the project visible to you.\n"
    out += "Consider the contents of ALL files in the project.\n\n"
    out += base_artifact.strip() + "\n\n"
    out += "Here is a list of files that exist on the file system but are not being shown to you:\n\n"
    out += "  - .gitignore\n"
    out += "  - package-lock.json\n"
    return out
