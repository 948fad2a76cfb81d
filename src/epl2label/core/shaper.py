"""Bidirectional text shaping.

Turns a logical-order string that may mix Arabic, Latin, digits and
punctuation into a display-order string that can be drawn strictly left to
right: Arabic letters are replaced by their contextual presentation forms
(and ligatures), right-to-left runs are reversed, left-to-right runs keep
their order, and the runs are concatenated in visual order.
"""

import unicodedata

from arabic_reshaper import ArabicReshaper
from bidi.algorithm import get_display

from epl2label.config import RenderConfig

# Bidi classes that make a string need reordering
RTL_BIDI_CLASSES = frozenset({"R", "AL", "RLE", "RLO", "RLI"})

# A left-to-right span starts and ends on one of these classes...
LTR_SPAN_CLASSES = frozenset({"L", "EN", "ET"})
# ...and may hold these in between
LTR_SPAN_GLUE = frozenset({"WS", "ES", "CS"})

LEFT_TO_RIGHT_EMBEDDING = "\u202a"
POP_DIRECTIONAL_FORMATTING = "\u202c"


def has_rtl(text: str) -> bool:
    """Check whether any character of ``text`` is right-to-left."""
    return any(unicodedata.bidirectional(char) in RTL_BIDI_CLASSES for char in text)


def embed_ltr_spans(text: str) -> str:
    """Wrap each left-to-right span of ``text`` in an LRE/PDF embedding.

    A span is a stretch of Latin letters, digits and number affixes, joined
    by spaces or separators, such as ``"5.00 EGP"``. Inside a right-to-left
    paragraph the bidi algorithm would otherwise resolve the spaces between
    its words to the paragraph direction and swap the words.
    """
    classes = [unicodedata.bidirectional(char) for char in text]
    pieces = []
    i = 0
    while i < len(text):
        if classes[i] not in LTR_SPAN_CLASSES:
            pieces.append(text[i])
            i += 1
            continue

        end = i + 1
        j = i + 1
        while j < len(text) and (classes[j] in LTR_SPAN_CLASSES or classes[j] in LTR_SPAN_GLUE):
            if classes[j] in LTR_SPAN_CLASSES:
                end = j + 1
            j += 1

        pieces.append(f"{LEFT_TO_RIGHT_EMBEDDING}{text[i:end]}{POP_DIRECTIONAL_FORMATTING}")
        i = end
    return "".join(pieces)


class TextShaper:
    """Shapes logical strings into display order.

    The reshaper is configured once and only read afterwards, so one shaper
    can serve many labels and threads.

    Example:
        shaper = TextShaper()
        display = shaper.shape("عصير برتقال    5.00 EGP")
        # "5.00 EGP    " followed by the reversed, shaped Arabic
    """

    def __init__(self, config: RenderConfig | None = None) -> None:
        config = config or RenderConfig()
        self._reshaper = ArabicReshaper(
            configuration={
                "delete_harakat": False,
                "support_ligatures": config.arabic_ligatures,
            }
        )

    def shape(self, text: str) -> str:
        """Convert a logical-order string to display order.

        Arabic shaping runs on the logical string so every letter sees its
        real neighbours. Left-to-right spans are then embedded so that
        ``"5.00 EGP"`` stays one run, and the bidi algorithm reverses the
        right-to-left runs and lays all runs out in visual order.

        Args:
            text: Logical-order text

        Returns:
            Display-order text, unchanged when it holds no RTL characters
        """
        if not text:
            return ""
        if not has_rtl(text):
            return text

        shaped = self._reshaper.reshape(text)
        display = get_display(embed_ltr_spans(shaped))
        return display.replace(LEFT_TO_RIGHT_EMBEDDING, "").replace(POP_DIRECTIONAL_FORMATTING, "")


def shape_text(text: str, config: RenderConfig | None = None) -> str:
    """Shape ``text`` with a one-off TextShaper."""
    return TextShaper(config).shape(text)
