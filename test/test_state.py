from sitewright.project import ProjectState, ProjectTree, merge_steps, next_step_id
from sitewright.steps import Step, parse_steps


def _file(step_id: int, path: str, code: str) -> Step:
    return Step(id=step_id, title=f"Create {path}", type="CreateFile", path=path, code=code)


def _assert_single_active(steps) -> None:
    active = [step for step in steps if step.status == "active"]
    assert len(active) <= 1
    if active:
        pivot = active[0].id
        assert all(step.status == "completed" for step in steps if step.id < pivot)
        assert all(step.status == "pending" for step in steps if step.id > pivot)


def test_two_batches_converge_on_latest_content() -> None:
    state = ProjectState()
    state.merge([_file(1, "src/app.js", "v1")])
    result = state.merge([_file(1, "src/app.js", "v2")])

    assert [step.id for step in result.steps] == [1, 2]
    assert len(result.files) == 1
    src = result.files[0]
    assert src.type == "folder"
    assert [(child.name, child.content) for child in src.children] == [("app.js", "v2")]
    assert all(step.status == "completed" for step in result.steps)


def test_parsed_batches_keep_contiguous_ids() -> None:
    state = ProjectState()
    state.merge(parse_steps('<boltArtifact title="A"><boltAction type="file" filePath="a.txt">a</boltAction></boltArtifact>'))
    result = state.merge(
        parse_steps('<boltArtifact title="B"><boltAction type="file" filePath="b.txt">b</boltAction></boltArtifact>')
    )

    assert [step.id for step in result.steps] == [1, 2, 3, 4]
    assert [step.title for step in result.steps] == ["A", "Create a.txt", "B", "Create b.txt"]
    assert [item.path for item in result.files] == ["a.txt", "b.txt"]


def test_step_once_moves_one_step_at_a_time() -> None:
    state = ProjectState(steps=[_file(3, "c.txt", "c"), _file(1, "a.txt", "a"), _file(2, "b.txt", "b")])

    assert state.step_once() == "a.txt"
    _assert_single_active(state.steps)
    assert len(state.tree) == 0

    assert state.step_once() == "b.txt"
    _assert_single_active(state.steps)
    assert state.tree.contains("a.txt")
    assert not state.tree.contains("b.txt")

    state.step_once()
    state.step_once()
    _assert_single_active(state.steps)
    assert state.active_step() is None
    assert [step.status for step in state.steps] == ["completed"] * 3
    assert [item.path for item in state.tree.items()] == ["a.txt", "b.txt", "c.txt"]


def test_merge_selects_last_step_with_a_path() -> None:
    batch = parse_steps(
        '<boltArtifact title="T">'
        '<boltAction type="file" filePath="a.txt">a</boltAction>'
        '<boltAction type="shell">npm start</boltAction>'
        "</boltArtifact>"
    )
    result = ProjectState().merge(batch)
    assert result.selected_path == "a.txt"


def test_run_script_and_folder_steps_do_not_touch_tree() -> None:
    state = ProjectState()
    result = state.merge(
        [
            Step(id=1, title="Project Files", type="CreateFolder"),
            Step(id=2, title="Run command", type="RunScript", code="npm install"),
            Step(id=3, title="Create x", type="CreateFile", path="x.txt"),
        ]
    )
    assert result.files == []
    assert result.selected_path == "x.txt"
    assert [step.status for step in result.steps] == ["completed"] * 3


def test_collision_is_rejected_but_completed() -> None:
    state = ProjectState()
    state.merge([_file(1, "src/app.js", "v1")])
    result = state.merge([_file(1, "src", "oops")])

    assert result.rejected == [2]
    assert result.steps[1].status == "completed"
    assert state.tree.get("src").type == "folder"


def test_merge_rebases_batch_ids_and_resets_status() -> None:
    state = ProjectState()
    state.merge([_file(1, "a.txt", "a"), _file(2, "b.txt", "b")])
    stale = _file(7, "c.txt", "c")
    stale.status = "completed"
    result = state.merge([stale])

    assert result.steps[-1].id == 3
    assert result.steps[-1].status == "completed"
    assert state.tree.contains("c.txt")


def test_merge_steps_leaves_inputs_untouched() -> None:
    batch = [_file(1, "a/b.txt", "b")]
    first = merge_steps([], [], batch)
    assert batch[0].status == "pending"

    second = merge_steps(first.files, first.steps, [_file(1, "a/b.txt", "b2")])
    assert first.files[0].children[0].content == "b"
    assert second.files[0].children[0].content == "b2"
    assert [step.id for step in second.steps] == [1, 2]


def test_next_step_id() -> None:
    assert next_step_id([]) == 1
    assert next_step_id([_file(4, "a", ""), _file(2, "b", "")]) == 5


def test_given_empty_tree_is_the_one_folded_into() -> None:
    tree = ProjectTree()
    state = ProjectState(tree)
    state.merge([_file(1, "a.txt", "a")])

    assert state.tree is tree
    assert tree.contains("a.txt")
