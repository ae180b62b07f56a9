from __future__ import annotations

from typing import Any

from PySide6.QtCore import QObject, QRunnable, QThreadPool
from loguru import logger

from core.services.interfaces import ImageLoader
from core.services.transitions import LoadTicket


class _ImageTask(QRunnable):
    """QRunnable for background image loading.

    Emits `receiver.imageLoaded(token, url, image)` upon completion, with
    `image` None on failure. The receiver is expected to own a Qt
    `Signal(str, str, object)` named `imageLoaded`.
    """

    def __init__(self, *, url: str, side: int, service: Any, receiver: QObject, token: str) -> None:
        super().__init__()
        self._url = url
        self._side = side
        self._service = service
        self._receiver = receiver
        self._token = token

    def run(self) -> None:  # type: ignore[override]
        try:
            if self._side > 0:
                img = self._service.get_thumbnail(self._url, self._side)
            else:
                img = self._service.get_full(self._url)
        except Exception as ex:  # pragma: no cover - GUI background task
            logger.error("Image task failed for {}: {}", self._url, ex)
            img = None
        try:
            self._receiver.imageLoaded.emit(self._token, self._url, img)  # type: ignore[attr-defined]
        except RuntimeError as ex:  # pragma: no cover - receiver destroyed
            logger.debug("Image task receiver gone: {}", ex)


class ImageTaskRunner(ImageLoader):
    """Dispatches image load tasks to the global thread pool.

    Token formats:
    - Lightbox image: "lightbox|{generation}|{full|preview}|{url}"
    - Grid thumbnail: "grid|{key}|{thumb_side}"

    Lightbox tokens are mapped back to their `LoadTicket` with `take_ticket`.
    """

    def __init__(self, *, service: Any, receiver: QObject) -> None:
        self._service = service
        self._receiver = receiver
        self._pool = QThreadPool.globalInstance()
        self._tickets: dict[str, LoadTicket] = {}

    def request(self, ticket: LoadTicket) -> None:
        """Load a lightbox image in the background."""
        if self._service is None:
            return
        kind = "preview" if ticket.preview else "full"
        token = f"lightbox|{ticket.generation}|{kind}|{ticket.url}"
        self._tickets[token] = ticket
        self._start(ticket.url, 0, token)

    def take_ticket(self, token: str) -> LoadTicket | None:
        """Return and forget the ticket registered for `token`."""
        return self._tickets.pop(token, None)

    def request_grid_thumbnail(self, key: str, url: str, thumb_side: int) -> str:
        """Request a grid thumbnail for `url` with given `thumb_side`. Returns token."""
        token = f"grid|{key}|{thumb_side}"
        if self._service is None:
            return token
        self._start(url, thumb_side, token)
        return token

    def _start(self, url: str, side: int, token: str) -> None:
        task = _ImageTask(
            url=url,
            side=side,
            service=self._service,
            receiver=self._receiver,
            token=token,
        )
        self._pool.start(task)
