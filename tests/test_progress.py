from datetime import datetime

from rich.console import Console

from buildwatch.cli.common.progress import _summary_line, render_radiator
from buildwatch.core.builds import BuildDefinition, BuildStatus, BuildStatusEnum
from buildwatch.core.polling import PollResult


def _status(definition_id, status):
    return BuildStatus(
        build_definition_id=definition_id,
        name=f"def-{definition_id}",
        build_id="1",
        status=status,
        comment="[not markup]",
    )


def test_summary_line_counts_statuses_and_missing():
    result = PollResult(
        statuses=[
            _status("1", BuildStatusEnum.WORKING),
            _status("2", BuildStatusEnum.WORKING),
            _status("3", BuildStatusEnum.BROKEN),
        ],
        missing=[BuildDefinition(uri="vstfs:///Build/Definition/4", name="quiet")],
    )

    line = _summary_line(result, datetime(2024, 1, 1, 12, 0, 5)).plain

    assert line.startswith("12:00:05")
    assert "working=2" in line
    assert "broken=1" in line
    assert "in progress=0" in line
    assert "no data=1" in line


def test_render_radiator_shows_names_and_escaped_comments():
    result = PollResult(statuses=[_status("1", BuildStatusEnum.IN_PROGRESS)], missing=[])
    console = Console(width=200, record=True)

    console.print(render_radiator(result, datetime(2024, 1, 1)))
    text = console.export_text()

    assert "def-1" in text
    assert "InProgress" in text
    assert "[not markup]" in text
    assert "no data" not in text
