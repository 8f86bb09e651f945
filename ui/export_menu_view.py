import tkinter as tk
from tkinter import ttk

from models.session_model import ExportFormat

FORMAT_LABELS = {
    ExportFormat.CSV: "CSV (.csv)",
    ExportFormat.XLSX: "Excel (.xlsx)",
    ExportFormat.PDF: "PDF (.pdf)",
}


class ExportMenuView(ttk.Frame):
    """
    Export button with a popup format menu. The button only reports clicks;
    whether the menu is shown is decided by the controller via set_open().
    """

    def __init__(self, parent, on_toggle=None, on_select=None, on_dismiss=None, *args, **kwargs):
        super().__init__(parent, *args, **kwargs)
        self.on_toggle = on_toggle
        self.on_select = on_select
        self.on_dismiss = on_dismiss

        self._button = ttk.Button(self, text="💾 Export ▾", command=self._handle_toggle)
        self._button.pack(fill="x")

        self._menu = tk.Menu(self, tearoff=0)
        for fmt, label in FORMAT_LABELS.items():
            self._menu.add_command(label=label, command=lambda f=fmt: self._handle_select(f))
        self._menu.bind("<Unmap>", self._handle_dismiss)
        self._menu.bind("<Escape>", self._handle_dismiss)
        self._posted = False

    def _handle_toggle(self):
        if self.on_toggle:
            self.on_toggle()

    def _handle_select(self, fmt):
        if self.on_select:
            self.on_select(fmt)

    def _handle_dismiss(self, event=None):
        if self._posted and self.on_dismiss:
            self.on_dismiss()

    def set_open(self, is_open):
        if is_open and not self._posted:
            self._posted = True
            x = self._button.winfo_rootx()
            y = self._button.winfo_rooty() + self._button.winfo_height()
            try:
                self._menu.tk_popup(x, y)
            finally:
                self._menu.grab_release()
        elif not is_open and self._posted:
            self._posted = False
            self._menu.unpost()
