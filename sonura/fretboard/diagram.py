"""Plain-text fretboard diagrams."""

from typing import List, Sequence

from ..core.constants import DISPLAY_FRETS, STANDARD_TUNING
from .fingering import find_barre


def render_diagram(
    frets: Sequence[int],
    num_frets: int = DISPLAY_FRETS,
    tuning: Sequence[str] = STANDARD_TUNING,
) -> str:
    """
    Draw a fretting as text, highest string on top like tablature.

        e |-0-|---|---|...
        B |---|-1-|---|...

    Muted strings are marked 'x', open strings 'o', barre frets '='.
    Frets beyond num_frets are listed after the row instead of drawn.
    """
    barre = find_barre(tuple(frets))
    lines: List[str] = []
    header = "    " + "".join(f"{n:^4}" for n in range(1, num_frets + 1))
    lines.append(header.rstrip())

    for string in reversed(range(len(tuning))):
        fret = frets[string]
        name = tuning[string] if string < len(tuning) - 1 else tuning[string].lower()
        marker = "x" if fret < 0 else ("o" if fret == 0 else " ")
        cells = []
        for position in range(1, num_frets + 1):
            if position == fret:
                cells.append("-●-|")
            elif (
                barre is not None
                and position == barre.fret
                and barre.first_string <= string <= barre.last_string
                and fret > 0
            ):
                cells.append("-=-|")
            else:
                cells.append("---|")
        row = f"{name:<2}{marker}|" + "".join(cells)
        if fret > num_frets:
            row += f" ({fret})"
        lines.append(row)

    return "\n".join(lines)
