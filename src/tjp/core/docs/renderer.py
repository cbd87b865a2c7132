"""
Plain text rendering of keyword documentation.

The layout is fixed at 79 columns: a 13 column label ("Keyword:",
"Purpose:", ...) followed by a 66 column text block. Text is word wrapped
with a hanging indent; words are never split and embedded newlines always
start a new line.
"""

from .keyword_doc import KeywordDocumentation, SyntaxReference

LINE_WIDTH = 79
TAG_WIDTH = 13
TEXT_WIDTH = LINE_WIDTH - TAG_WIDTH
SCENARIO_MARKER = "[sc:]"


def wrap(text: str, width: int) -> list[str]:
    """
    Split ``text`` into lines of at most ``width`` characters.

    A word longer than ``width`` gets a line of its own. Empty source lines
    are kept as empty lines.
    """
    lines: list[str] = []
    for paragraph in text.split("\n"):
        line = ""
        for word in paragraph.split():
            if line and len(line) + 1 + len(word) > width:
                lines.append(line)
                line = word
            else:
                line = f"{line} {word}" if line else word
        lines.append(line)
    return lines


def indent_lines(lines: list[str], indent: int, first_prefix: str = "") -> str:
    """Join ``lines``; the first gets ``first_prefix``, the rest ``indent`` spaces."""
    out = []
    for index, line in enumerate(lines):
        if index == 0:
            out.append(f"{first_prefix}{line}".rstrip())
        elif line:
            out.append(" " * indent + line)
        else:
            out.append("")
    return "\n".join(out)


def _section(tag: str, text: str) -> str:
    return indent_lines(wrap(text, TEXT_WIDTH), TAG_WIDTH, tag.ljust(TAG_WIDTH))


def _argument_block(entry: KeywordDocumentation) -> list[str]:
    blocks = []
    for arg in entry.args:
        text = arg.text
        if arg.reference is not None:
            text = f"Comma separated list. See {arg.reference} for details."
        if arg.type_spec:
            label = f"{arg.name} [{arg.type_spec[1:-1]}]: "
        else:
            label = f"{arg.name}: "
        width = max(TEXT_WIDTH - len(label), 10)
        blocks.append(indent_lines(wrap(text, width), len(label), label))
    return blocks


def render(entry: KeywordDocumentation) -> str:
    """Render one keyword as the text of a reference manual page."""
    sections = []

    head = f"{'Keyword:'.ljust(TAG_WIDTH)}{entry.keyword}"
    flags = (
        f"Scenario Specific: {'Yes' if entry.scenario_specific else 'No'}     "
        f"Inheritable: {'Yes' if entry.inheritable else 'No'}"
    )
    if len(head) + 5 + len(flags) <= LINE_WIDTH:
        sections.append(f"{head}     {flags}")
    else:
        # Long keywords push the flags onto an indented continuation line.
        sections.append(f"{head}\n{' ' * TAG_WIDTH}{flags}")
    sections.append(_section("Purpose:", entry.doc))
    sections.append(_section("Syntax:", entry.syntax))

    arguments = _argument_block(entry)
    if arguments:
        # Each argument block is already indented relative to its own label.
        text = "\n\n".join(arguments)
        lines = text.split("\n")
        sections.append(indent_lines(lines, TAG_WIDTH, "Arguments:".ljust(TAG_WIDTH)))
    else:
        sections.append(_section("Arguments:", "none"))

    contexts = entry.contexts
    if contexts:
        sections.append(_section("Context:", ", ".join(c.keyword for c in contexts)))
    else:
        sections.append(_section("Context:", "Global scope"))

    attributes = sorted(entry.optional_attributes, key=lambda a: a.keyword)
    if attributes:
        names = [
            f"{SCENARIO_MARKER}{a.keyword}" if a.scenario_specific else a.keyword
            for a in attributes
        ]
        sections.append(_section("Attributes:", ", ".join(names)))
    else:
        sections.append(_section("Attributes:", "none"))

    if entry.see_also:
        sections.append(_section("See also:", ", ".join(a.keyword for a in entry.see_also)))

    return "\n\n".join(sections) + "\n"


def render_manual(reference: SyntaxReference) -> str:
    """Render every keyword of ``reference``, separated by rulers."""
    ruler = "-" * LINE_WIDTH
    return f"\n{ruler}\n\n".join(render(entry) for entry in reference)
