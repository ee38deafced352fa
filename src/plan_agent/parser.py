"""Plan parsing: free-form response text to an ordered list of steps.

Grammar: every line of the form ``<ASCII digits>.<rest-of-line>`` starting at
column 0 is one step, in order of appearance; the step description is the
rest of the line with surrounding whitespace removed. Lines whose rest is
blank are not steps. Nothing else in the text (file names, code blocks,
commands) is interpreted.

If no line matches, the plan is a single fallback step so that a parsed plan
is never empty.
"""

from __future__ import annotations

import re

from plan_agent.models import Step

FALLBACK_STEP_DESCRIPTION = "Execute the plan"

_NUMBERED_LINE = re.compile(r"^[0-9]+\.[ \t]*(\S[^\r\n]*)\r?$", re.MULTILINE)


def parse_steps(text: str) -> list[Step]:
    """Parse numbered lines into steps. Total: never raises, never empty."""
    steps = [Step(description=match.group(1).strip()) for match in _NUMBERED_LINE.finditer(text)]
    if not steps:
        steps.append(Step(description=FALLBACK_STEP_DESCRIPTION))
    return steps


def format_plan(task: str, response_text: str) -> str:
    """Render the plan body shown at the confirmation gate."""
    return f"Plan for: {task}\n\n{response_text}"
