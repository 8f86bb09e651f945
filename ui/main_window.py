import logging
import queue
import threading
import tkinter as tk
from tkinter import ttk, filedialog, messagebox

from controllers.app_controller import AppController
from controllers.protocol import ViewPort
from models.session_model import ClearFilter, DismissExportMenu, Export, SetFilter, ToggleExportMenu
from ui.export_menu_view import ExportMenuView
from ui.table_view import TableView

logger = logging.getLogger(__name__)

POLL_MS = 100


class MainWindow(ViewPort):
    def __init__(self, controller: AppController, refresh_interval_seconds: int = 300, title="Vadimpex Products"):
        self.controller = controller
        self.refresh_interval_ms = max(1, refresh_interval_seconds) * 1000
        self._results = queue.Queue()

        self.window = tk.Tk()
        self.window.title(title)
        self.window.geometry("1200x750")
        self.window.protocol("WM_DELETE_WINDOW", self.on_closing)

        self.toolbar = ttk.Frame(self.window, relief=tk.RAISED, borderwidth=1)
        self.toolbar.pack(side="top", fill="x")
        self.btn_refresh = ttk.Button(self.toolbar, text="🔄 Refresh", command=self.start_refresh)
        self.btn_refresh.pack(side="left", padx=5, pady=5)
        self.export_view = ExportMenuView(
            self.toolbar,
            on_toggle=lambda: self.controller.dispatch(ToggleExportMenu()),
            on_select=self.export_action,
            on_dismiss=lambda: self.controller.dispatch(DismissExportMenu()),
        )
        self.export_view.pack(side="left", padx=5, pady=5)
        ttk.Separator(self.toolbar, orient="vertical").pack(side="left", fill="y", padx=10, pady=5)
        self.lbl_updated = ttk.Label(self.toolbar, text="Last updated: never", font=("Arial", 9, "italic"))
        self.lbl_updated.pack(side="left", pady=5)

        self.status_frame = ttk.Frame(self.window, relief=tk.SUNKEN, padding=(5, 2))
        self.status_frame.pack(side="bottom", fill="x")
        self.lbl_status = ttk.Label(self.status_frame, text="Ready", anchor="w")
        self.lbl_status.pack(side="left", fill="x")
        self.progress = ttk.Progressbar(self.status_frame, mode='indeterminate', length=200)

        self.table = TableView(
            self.window,
            on_search=lambda term: self.controller.dispatch(SetFilter(term)),
            on_clear=lambda: self.controller.dispatch(ClearFilter()),
        )
        self.table.pack(fill="both", expand=True, padx=10, pady=10)

        self.controller.attach_view(self)

    def run(self):
        self.controller.view_loaded()
        self.start_refresh()
        self.window.after(self.refresh_interval_ms, self._on_timer)
        self.window.after(POLL_MS, self._poll_results)
        self.window.mainloop()

    def run_task(self, description, func):
        self.window.config(cursor="watch")
        self.lbl_status.config(text=f"⏳ {description}...")
        self.window.update()
        try:
            func()
        except Exception as e:
            logger.exception("%s failed", description)
            self.lbl_status.config(text="❌ Error")
            messagebox.showerror("Error", str(e))
        finally:
            self.window.config(cursor="")

    # ========================================================
    #  REFRESH
    # ========================================================
    def _on_timer(self):
        self.start_refresh()
        self.window.after(self.refresh_interval_ms, self._on_timer)

    def start_refresh(self):
        # Same steps as dispatch(Refresh()), with the fetch moved off the UI thread
        seq = self.controller.begin_refresh()
        threading.Thread(target=self._fetch_worker, args=(seq,), daemon=True).start()

    def _fetch_worker(self, seq):
        text, error = self.controller.fetch(seq)
        self._results.put((seq, text, error))

    def _poll_results(self):
        while True:
            try:
                seq, text, error = self._results.get_nowait()
            except queue.Empty:
                break
            if error is not None:
                self.controller.fail_refresh(seq, error)
            else:
                self.controller.complete_refresh(seq, text)
        self.window.after(POLL_MS, self._poll_results)

    # ========================================================
    #  EXPORT
    # ========================================================
    def export_action(self, fmt):
        self.run_task(f"Exporting {fmt.value.upper()}", lambda: self.controller.dispatch(Export(fmt)))

    # ========================================================
    #  VIEW PORT
    # ========================================================
    def show_loading(self):
        self.table.show_message("Loading products...")
        self.lbl_status.config(text="⏳ Loading products...")
        self.progress.pack(side="right", padx=10)
        self.progress.start(10)

    def _stop_progress(self):
        self.progress.stop()
        self.progress.pack_forget()

    def show_table(self, tree):
        self._stop_progress()
        self.table.render(tree)
        self.lbl_status.config(text="✅ Ready")

    def show_error(self, message):
        self._stop_progress()
        self.table.show_message(message, foreground="#b00020")
        self.lbl_status.config(text="❌ Error")

    def apply_visibility(self, mask):
        self.table.apply_visibility(mask)

    def update_result_count(self, text):
        self.table.set_status(text)

    def update_last_updated(self, when):
        self.lbl_updated.config(text=f"Last updated: {when:%Y-%m-%d %H:%M:%S}")

    def reset_search(self):
        self.table.reset_search()

    def set_export_menu_open(self, is_open):
        self.export_view.set_open(is_open)

    def offer_download(self, artifact):
        ext = artifact.filename.rsplit(".", 1)[-1]
        path = filedialog.asksaveasfilename(
            initialfile=artifact.filename,
            defaultextension=f".{ext}",
            filetypes=[(ext.upper(), f"*.{ext}")],
        )
        if not path: return
        with open(path, "wb") as f:
            f.write(artifact.content)
        logger.info("Saved %s", path)
        self.lbl_status.config(text=f"✅ Saved {artifact.filename}")

    def alert(self, title, message):
        messagebox.showerror(title, message)

    def on_closing(self):
        if messagebox.askokcancel("Quit", "Close the product viewer?"):
            self.controller.shutdown()
            self.window.destroy()
