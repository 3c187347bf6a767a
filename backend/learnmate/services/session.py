"""
Presentation model for learning sessions.

The parser only produces titles and content; sessions add a synthetic id
and a completion flag per step, and track overall progress.
"""

from typing import List

from learnmate.models.learning import LearningSession, ParsedResponse, SessionStep


def build_session(topic: str, parsed: ParsedResponse) -> LearningSession:
    """Wrap parsed steps as uncompleted session steps with ids step-0, step-1, ..."""
    steps = [
        SessionStep(id=f"step-{index}", title=step.title, content=step.content)
        for index, step in enumerate(parsed.steps)
    ]
    return LearningSession(
        topic=topic,
        steps=steps,
        related_topics=list(parsed.related_topics),
        progress=compute_progress(steps),
    )


def compute_progress(steps: List[SessionStep]) -> int:
    """Percentage of completed steps, rounded to the nearest integer."""
    if not steps:
        return 0
    completed = sum(1 for step in steps if step.completed)
    return int(completed * 100 / len(steps) + 0.5)
