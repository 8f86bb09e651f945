import tkinter as tk
from tkinter import ttk

STATUS_COLORS = {
    "status-available": "#dff5e1",
    "status-low": "#fff4d6",
    "status-out": "#fbe0e0",
}


class TableView(ttk.Frame):
    """
    Search bar + product grid. on_search(term) fires on every key release,
    on_clear() on the clear button; the view never filters on its own.
    """

    def __init__(self, parent, on_search=None, on_clear=None, *args, **kwargs):
        super().__init__(parent, *args, **kwargs)
        self.on_search = on_search
        self.on_clear = on_clear
        control_frame = ttk.Frame(self)
        control_frame.pack(fill="x", pady=(0, 5))
        ttk.Label(control_frame, text="Search:").pack(side="left", padx=(0, 5))
        self.search_var = tk.StringVar()
        self.search_entry = ttk.Entry(control_frame, textvariable=self.search_var, width=30)
        self.search_entry.pack(side="left", padx=(0, 10))
        self.search_entry.bind("<KeyRelease>", self._on_search)
        self.clear_search_btn = ttk.Button(control_frame, text="Clear", command=self._clear_search)
        self.clear_search_btn.pack(side="left")
        self.status_label = ttk.Label(control_frame, text="")
        self.status_label.pack(side="right")
        self.message_label = ttk.Label(self, text="", anchor="center", padding=(0, 8))
        tree_frame = ttk.Frame(self)
        tree_frame.pack(fill="both", expand=True)
        self._tree = ttk.Treeview(tree_frame, show="headings")
        self._tree.pack(side="left", fill="both", expand=True)
        self._scroll_y = ttk.Scrollbar(tree_frame, orient="vertical", command=self._tree.yview)
        self._scroll_y.pack(side="right", fill="y")
        self._tree.configure(yscrollcommand=self._scroll_y.set)
        self._scroll_x = ttk.Scrollbar(self, orient="horizontal", command=self._tree.xview)
        self._scroll_x.pack(side="bottom", fill="x")
        self._tree.configure(xscrollcommand=self._scroll_x.set)
        for tag, color in STATUS_COLORS.items():
            self._tree.tag_configure(tag, background=color)
        self._row_ids = []

    def _on_search(self, event=None):
        if self.on_search:
            self.on_search(self.search_var.get())

    def _clear_search(self):
        if self.on_clear:
            self.on_clear()

    def reset_search(self):
        self.search_var.set("")

    def show_message(self, text, foreground=""):
        self.message_label.config(text=text, foreground=foreground)
        self.message_label.pack(fill="x", before=self._tree.master)

    def hide_message(self):
        self.message_label.pack_forget()

    def clear(self):
        for r in self._tree.get_children(): self._tree.delete(r)
        self._tree["columns"] = ()
        self._row_ids = []

    def render(self, tree):
        self.clear()
        if tree.is_placeholder:
            self.show_message(tree.placeholder)
            return
        self.hide_message()
        columns = [f"c{i}" for i in range(len(tree.headers))]
        self._tree["columns"] = columns
        for col_id, col in zip(columns, tree.headers):
            self._tree.heading(col_id, text=col)
            self._tree.column(col_id, anchor="w", width=180)
        for row in tree.rows:
            # Treeview styles whole rows, so the first status cell decides
            tags = tuple(row.styles[:1])
            iid = self._tree.insert("", "end", iid=str(row.index),
                                    values=tuple(c.text for c in row.cells), tags=tags)
            self._row_ids.append(iid)

    def apply_visibility(self, mask):
        position = 0
        for iid, visible in zip(self._row_ids, mask):
            if visible:
                self._tree.move(iid, "", position)
                position += 1
            else:
                self._tree.detach(iid)

    def set_status(self, text):
        self.status_label.config(text=text)
