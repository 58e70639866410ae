"""Output ceilings: cut overlong output and mark the cut explicitly."""

from doc_convert.models import RenderLimits, RenderWarning

TRUNCATION_MARKER = "[content too long, truncated...]"


def apply_limits(
    text: str,
    limits: RenderLimits | None,
    warnings: list[RenderWarning] | None = None,
) -> str:
    """
    Keep at most limits.max_chars characters and limits.max_lines lines.

    When anything is cut, the marker is appended on its own paragraph and a
    "truncated" warning is recorded. Never raises.
    """
    if limits is None:
        return text
    reasons: list[str] = []
    if limits.max_chars is not None and len(text) > limits.max_chars:
        text = text[:limits.max_chars]
        reasons.append(f"over {limits.max_chars} characters")
    if limits.max_lines is not None:
        lines = text.split("\n")
        if len(lines) > limits.max_lines:
            text = "\n".join(lines[:limits.max_lines])
            reasons.append(f"over {limits.max_lines} lines")
    if not reasons:
        return text
    if warnings is not None:
        warnings.append(RenderWarning(kind="truncated", message="output " + " and ".join(reasons)))
    return text.rstrip() + "\n\n" + TRUNCATION_MARKER
