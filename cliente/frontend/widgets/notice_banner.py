"""Banner de avisos con cierre automatico."""

from __future__ import annotations

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtWidgets import QFrame, QHBoxLayout, QLabel, QPushButton, QVBoxLayout, QWidget

from cliente.backend.notices import Notice, NoticeBoard, NoticeKind

_ACCENT_BY_KIND: dict[NoticeKind, str] = {
    NoticeKind.SUCCESS: "#16a34a",
    NoticeKind.DELETED: "#16a34a",
    NoticeKind.ERROR: "#dc2626",
    NoticeKind.ACCESS_DENIED: "#ca8a04",
    NoticeKind.INFO: "#2563eb",
}


class NoticeBanner(QFrame):
    """Muestra el aviso vigente del NoticeBoard y lo oculta al expirar."""

    def __init__(self, notices: NoticeBoard, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._notices = notices
        self.setObjectName("noticeBanner")

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._notices.dismiss)

        self._title_label = QLabel(self)
        self._title_label.setObjectName("noticeTitle")
        self._message_label = QLabel(self)
        self._message_label.setObjectName("noticeMessage")
        self._message_label.setWordWrap(True)

        close_button = QPushButton("✕", self)
        close_button.setObjectName("noticeClose")
        close_button.setCursor(Qt.CursorShape.PointingHandCursor)
        close_button.clicked.connect(self._notices.dismiss)

        text_layout = QVBoxLayout()
        text_layout.setSpacing(2)
        text_layout.addWidget(self._title_label)
        text_layout.addWidget(self._message_label)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(14, 10, 10, 10)
        layout.addLayout(text_layout, 1)
        layout.addWidget(close_button, 0, Qt.AlignmentFlag.AlignTop)

        self.hide()
        self._notices.add_listener(self._on_notice_changed)

    def _on_notice_changed(self, notice: Notice | None) -> None:
        """Refleja el aviso vigente y reinicia el temporizador de cierre."""
        self._timer.stop()
        if notice is None:
            self.hide()
            return

        accent = _ACCENT_BY_KIND.get(notice.kind, _ACCENT_BY_KIND[NoticeKind.INFO])
        self.setStyleSheet(
            f"""
            QFrame#noticeBanner {{
                background-color: #ffffff;
                border: 1px solid #e5e7eb;
                border-left: 5px solid {accent};
                border-radius: 10px;
            }}
            QLabel#noticeTitle {{
                color: #111827;
                font-family: "Segoe UI";
                font-size: 14px;
                font-weight: 700;
            }}
            QLabel#noticeMessage {{
                color: #4b5563;
                font-family: "Segoe UI";
                font-size: 12px;
            }}
            QPushButton#noticeClose {{
                background: transparent;
                border: none;
                color: #9ca3af;
                font-size: 14px;
                min-height: 20px;
                min-width: 20px;
            }}
            """
        )
        self._title_label.setText(notice.title)
        self._message_label.setText(notice.message)
        self.show()
        self._timer.start(int(self._notices.duration_seconds * 1000))
