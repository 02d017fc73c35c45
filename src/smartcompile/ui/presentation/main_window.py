"""Main workbench window.

A thin Qt shell over :class:`WorkbenchController`: widgets forward user
intents to the controller and repaint themselves from
:class:`~smartcompile.ui.events.StateChanged` events. The window holds no
state of its own beyond the widgets.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Awaitable

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPlainTextEdit,
    QPushButton,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from ...core.languages import LANGUAGE_LABELS
from ...editor.code_editor import CodeEditor
from ..events import StateChanged
from ..models.workbench_state import WorkbenchState

if TYPE_CHECKING:  # pragma: no cover - imports for type checking only
    from ...services.settings import Settings
    from ..application.controller import WorkbenchController

LOGGER = logging.getLogger(__name__)

WINDOW_APP_NAME = "Smart Compile"

# (action name, button label) in toolbar order.
BUTTONS: tuple[tuple[str, str], ...] = (
    ("run", "Run Code"),
    ("review", "AI Code Review"),
    ("explain", "Explain Error"),
    ("auto-comment", "Auto-Comment"),
    ("complexity", "Complexity Analysis"),
    ("format", "Format Code"),
)


class WorkbenchWindow(QMainWindow):
    """Language picker, code editor, output panel and action buttons."""

    def __init__(self, controller: WorkbenchController, *, settings: Settings | None = None) -> None:
        super().__init__()
        self._controller = controller
        self._pending: set[asyncio.Future[Any]] = set()
        theme = settings.theme if settings is not None else "dark"
        font_family = settings.font_family if settings is not None else "JetBrains Mono"
        font_size = settings.font_size if settings is not None else 13

        self.setWindowTitle(WINDOW_APP_NAME)
        self.resize(1200, 800)

        state = controller.state
        self._language_combo = QComboBox()
        self._language_combo.setObjectName("language-select")
        for language, label in LANGUAGE_LABELS.items():
            self._language_combo.addItem(label, language.value)
        self._language_combo.setCurrentIndex(self._language_combo.findData(state.language.value))

        self._editor = CodeEditor(
            language=state.language, theme=theme, font_family=font_family, font_size=font_size
        )
        self._editor.setPlainText(state.code)

        self._output = QPlainTextEdit()
        self._output.setObjectName("output-panel")
        self._output.setReadOnly(True)
        self._output.setPlainText(state.output)

        self._buttons: dict[str, QPushButton] = {}
        self._build_layout()

        self._language_combo.currentIndexChanged.connect(self._on_language_index_changed)
        self._editor.textChanged.connect(self._on_editor_text_changed)
        for action, button in self._buttons.items():
            button.clicked.connect(lambda _checked=False, name=action: self.trigger_action(name))

        controller.event_bus.subscribe(StateChanged, self._on_state_changed)

    # ------------------------------------------------------------------
    # Widget accessors (used by tests)
    # ------------------------------------------------------------------

    @property
    def editor(self) -> CodeEditor:
        return self._editor

    @property
    def output_panel(self) -> QPlainTextEdit:
        return self._output

    @property
    def language_combo(self) -> QComboBox:
        return self._language_combo

    def button(self, action: str) -> QPushButton:
        return self._buttons[action]

    # ------------------------------------------------------------------
    # Intents
    # ------------------------------------------------------------------

    def trigger_action(self, action: str) -> asyncio.Future[Any]:
        """Schedule the controller handler for ``action`` on the running loop."""

        LOGGER.debug("Button pressed: %s", action)
        return self.schedule_coroutine(self._controller.perform(action))

    def schedule_coroutine(self, coro: Awaitable[Any]) -> asyncio.Future[Any]:
        future = asyncio.ensure_future(coro)
        self._pending.add(future)
        future.add_done_callback(self._on_future_done)
        return future

    def _on_future_done(self, future: asyncio.Future[Any]) -> None:
        self._pending.discard(future)
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            LOGGER.error("Workbench action failed unexpectedly", exc_info=error)

    def _on_language_index_changed(self, index: int) -> None:
        value = self._language_combo.itemData(index)
        if value is None or value == self._controller.state.language.value:
            return
        self._controller.select_language(value)

    def _on_editor_text_changed(self) -> None:
        self._controller.edit_code(self._editor.toPlainText())

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def closeEvent(self, event: QCloseEvent) -> None:  # noqa: N802 - Qt override
        self._controller.event_bus.unsubscribe(StateChanged, self._on_state_changed)
        super().closeEvent(event)

    def _on_state_changed(self, event: StateChanged) -> None:
        self.render_state(event.current)

    def render_state(self, state: WorkbenchState) -> None:
        combo_index = self._language_combo.findData(state.language.value)
        if combo_index != self._language_combo.currentIndex():
            blocked = self._language_combo.blockSignals(True)
            try:
                self._language_combo.setCurrentIndex(combo_index)
            finally:
                self._language_combo.blockSignals(blocked)
        self._editor.set_language(state.language)
        self._editor.replace_text(state.code)
        if self._output.toPlainText() != state.output:
            self._output.setPlainText(state.output)

    def _build_layout(self) -> None:
        central = QWidget(self)
        root = QVBoxLayout(central)

        header = QLabel(WINDOW_APP_NAME)
        header.setObjectName("app-header")
        header.setAlignment(Qt.AlignmentFlag.AlignCenter)
        header.setStyleSheet("font-size: 22px; font-weight: 600; padding: 6px;")
        root.addWidget(header)

        language_row = QHBoxLayout()
        language_label = QLabel("Select Language: ")
        language_label.setBuddy(self._language_combo)
        language_row.addWidget(language_label)
        language_row.addWidget(self._language_combo)
        language_row.addStretch(1)
        root.addLayout(language_row)

        output_container = QWidget()
        output_layout = QVBoxLayout(output_container)
        output_layout.setContentsMargins(0, 0, 0, 0)
        output_layout.addWidget(QLabel("Output:"))
        output_layout.addWidget(self._output)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.addWidget(self._editor)
        splitter.addWidget(output_container)
        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 2)
        root.addWidget(splitter, 1)

        button_row = QHBoxLayout()
        for action, label in BUTTONS:
            button = QPushButton(label)
            button.setObjectName(f"action-{action}")
            self._buttons[action] = button
            button_row.addWidget(button)
        root.addLayout(button_row)

        self.setCentralWidget(central)


__all__ = ["WorkbenchWindow", "BUTTONS", "WINDOW_APP_NAME"]
