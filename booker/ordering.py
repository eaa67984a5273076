"""pytest plugin: explicit dependency edges between scenario tests.

    @pytest.mark.scenario("update", depends=("create",))

Marked tests in a module are reordered so every scenario runs after its
dependencies; unmarked tests keep their slots. A scenario whose dependency
failed, errored, was skipped, or never ran is skipped.
"""

from collections.abc import Iterable, Sequence

import pytest

from booker.exceptions.custom import ScenarioGraphError

MARKER = "scenario"

ScenarioNode = tuple[str, tuple[str, ...]]

_outcomes_key = pytest.StashKey[dict[tuple[str, str], bool]]()


def topological_order(nodes: Sequence[ScenarioNode]) -> list[str]:
    """Order scenario names so dependencies come first.

    Ties are broken by declaration order, so an already valid sequence is
    returned unchanged.
    """
    names = [name for name, _ in nodes]
    if len(set(names)) != len(names):
        dupes = sorted({n for n in names if names.count(n) > 1})
        raise ScenarioGraphError(f"duplicate scenario names: {', '.join(dupes)}")

    depends = dict(nodes)
    for name, deps in nodes:
        unknown = [d for d in deps if d not in depends]
        if unknown:
            raise ScenarioGraphError(f"{name} depends on unknown scenario(s): {', '.join(unknown)}")

    ordered: list[str] = []
    done: set[str] = set()
    while len(ordered) < len(names):
        for name in names:
            if name not in done and all(d in done for d in depends[name]):
                ordered.append(name)
                done.add(name)
                break
        else:
            stuck = [n for n in names if n not in done]
            raise ScenarioGraphError(f"dependency cycle among: {', '.join(stuck)}")
    return ordered


def scenario_of(item: pytest.Item) -> ScenarioNode | None:
    marker = item.get_closest_marker(MARKER)
    if marker is None:
        return None
    name = marker.args[0] if marker.args else marker.kwargs["name"]
    depends: Iterable[str] = marker.kwargs.get("depends", ())
    if isinstance(depends, str):
        depends = (depends,)
    return name, tuple(depends)


def _module_key(item: pytest.Item) -> str:
    return item.nodeid.split("::", 1)[0]


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        f"{MARKER}(name, depends=()): named lifecycle step that runs after, "
        "and only if, the named scenarios in the same module passed",
    )


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(session, config, items: list[pytest.Item]) -> None:
    slots: dict[str, list[int]] = {}
    for index, item in enumerate(items):
        if scenario_of(item) is not None:
            slots.setdefault(_module_key(item), []).append(index)

    for module, positions in slots.items():
        marked = [items[i] for i in positions]
        nodes = [scenario_of(item) for item in marked]
        try:
            order = topological_order(nodes)
        except ScenarioGraphError as exc:
            raise pytest.UsageError(f"{module}: {exc}") from exc
        by_name = {node[0]: item for node, item in zip(nodes, marked)}
        for index, name in zip(positions, order):
            items[index] = by_name[name]


@pytest.hookimpl(tryfirst=True)
def pytest_runtest_setup(item: pytest.Item) -> None:
    node = scenario_of(item)
    if node is None:
        return
    outcomes = item.config.stash.get(_outcomes_key, {})
    module = _module_key(item)
    for dep in node[1]:
        passed = outcomes.get((module, dep))
        if passed is None:
            pytest.skip(f"depends on scenario '{dep}', which did not run")
        if not passed:
            pytest.skip(f"depends on scenario '{dep}', which did not pass")


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call):
    outcome = yield
    report = outcome.get_result()
    node = scenario_of(item)
    if node is None:
        return
    outcomes = item.config.stash.setdefault(_outcomes_key, {})
    key = (_module_key(item), node[0])
    passed = report.passed and not hasattr(report, "wasxfail")
    if report.when == "call":
        outcomes[key] = passed
    elif not passed:
        outcomes[key] = False
