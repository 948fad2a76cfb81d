"""Label composition: request in, EPL2 job bytes out.

Composition is synchronous and keeps no mutable state between calls, so a
LabelComposer (with its immutable settings and a shared LoadedFont) can serve
several threads at once. Every validation error surfaces before the first
byte is emitted; callers never see a partial job.
"""

import time

import structlog

from epl2label.config import ComposerSettings
from epl2label.core.layout import LayoutPlanner
from epl2label.domain.document import LabelDocument
from epl2label.domain.product import LabelRequest
from epl2label.io.epl import emit_document


class LabelComposer:
    """Plans and serializes labels.

    Example:
        composer = LabelComposer(ComposerSettings())
        job = composer.render(LabelRequest(products=(p1, p2), font=font))
        sink.send("Zebra LP2824", job)
    """

    def __init__(
        self,
        settings: ComposerSettings | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize the composer.

        Args:
            settings: Render, printer and layout settings (defaults if None)
            logger: Logger to report through (module logger if None)
        """
        self.settings = settings or ComposerSettings()
        self.logger = logger or structlog.get_logger("epl2label")
        self.planner = LayoutPlanner(self.settings)

    def plan(self, request: LabelRequest) -> LabelDocument:
        """Plan ``request`` into a LabelDocument without serializing it."""
        return self.planner.plan(request)

    def render(self, request: LabelRequest) -> bytes:
        """Plan and serialize ``request`` into EPL2 bytes.

        Raises:
            CompositionError: Any validation failure, raised before emission
        """
        start_time = time.time()
        document = self.plan(request)
        data = emit_document(document)
        duration_ms = (time.time() - start_time) * 1000

        self.logger.info(
            "Label rendered",
            products=request.product_count,
            text_blocks=len(document.text_blocks()),
            barcodes=len(document.barcodes()),
            size=len(data),
            duration_ms=round(duration_ms, 2),
        )
        return data


def compose_label(request: LabelRequest, settings: ComposerSettings | None = None) -> bytes:
    """Compose ``request`` into EPL2 bytes with a one-off composer."""
    return LabelComposer(settings).render(request)
