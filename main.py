"""
Mood-O-Mappr: linked histogram / pie / dendrogram views of a music & mental
health survey.

Install deps:
    pip install matplotlib pandas numpy
"""

from __future__ import annotations
import os
import queue
from typing import List, Optional

# GUI
import tkinter as tk
from tkinter import ttk, filedialog, messagebox

# Viz
import matplotlib
matplotlib.use("TkAgg")
from matplotlib.figure import Figure
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg

# Configure matplotlib for dark theme
import matplotlib.pyplot as plt
plt.style.use('dark_background')

from moodmappr.config import DEFAULT_CONFIG
from moodmappr.log import get_logger, setup_logging
from moodmappr.model import LoadWorker, RecordStore
from moodmappr.palette import build_palette
from moodmappr.selection import FilterEngine
from moodmappr.views import DendrogramView, Fader, HistogramView, HoverTip, PieView

logger = get_logger("moodmappr.app")

BG = '#2b2b2b'


# ---------------- GUI ----------------
class MoodExplorer(tk.Tk):
    def __init__(self):
        super().__init__()
        self.title("Mood-O-Mappr")
        self.geometry("1400x900")

        # Configure dark theme
        self.configure(bg=BG)
        self.style = ttk.Style()
        self.style.theme_use('clam')
        self.style.configure('TFrame', background=BG)
        self.style.configure('TLabel', background=BG, foreground='#ffffff')
        self.style.configure('TButton', background='#404040', foreground='#ffffff')
        self.style.configure('TProgressbar', background='#00ff00', troughcolor=BG)

        # State
        self.store: RecordStore | None = None
        self.engine: FilterEngine | None = None
        self.q: queue.Queue = queue.Queue()
        self.current_worker: LoadWorker | None = None
        self.histogram: HistogramView | None = None
        self.pie: PieView | None = None
        self.dendrogram: DendrogramView | None = None
        self._cids: List[tuple] = []

        # Top controls
        top = ttk.Frame(self)
        top.pack(side=tk.TOP, fill=tk.X, padx=10, pady=10)
        ttk.Button(top, text="Open Survey CSV", command=self.on_open).pack(side=tk.LEFT)
        self.clear_button = ttk.Button(top, text="Clear Filters", command=self.on_clear_filters, state="disabled")
        self.clear_button.pack(side=tk.LEFT, padx=(8, 0))

        self.path_var = tk.StringVar(value="No dataset loaded.")
        ttk.Label(self, textvariable=self.path_var, anchor="w", justify="left").pack(side=tk.TOP, fill=tk.X, padx=10)

        prog = ttk.Frame(self)
        prog.pack(side=tk.TOP, fill=tk.X, padx=10)
        self.progress = ttk.Progressbar(prog, mode="indeterminate")
        self.progress.pack(side=tk.LEFT, fill=tk.X, expand=True)
        self.status_var = tk.StringVar(value="Idle")
        ttk.Label(prog, textvariable=self.status_var, width=40).pack(side=tk.LEFT, padx=(10, 0))

        tip_text = "💡 Tip: Drag on the histogram to filter by hours, click a wedge to pin its genre (click again to un-pin)"
        ttk.Label(self, text=tip_text, font=('Arial', 9), foreground='#cccccc').pack(side=tk.TOP, fill=tk.X, padx=10, pady=(6, 0))

        self._build_views()

        # Queue polling
        self.after(100, self._poll_queue)

    # ----- Top controls -----
    def on_open(self):
        path = filedialog.askopenfilename(
            title="Choose a survey CSV",
            filetypes=[("CSV files", "*.csv"), ("All files", "*.*")],
        )
        if not path:
            return
        if self.current_worker is not None:
            messagebox.showinfo("Busy", "A dataset is already loading.")
            return
        path = os.path.normpath(path)
        self.path_var.set(path)
        self.status_var.set("Loading…")
        self.progress.start(10)
        self.current_worker = LoadWorker(path, self.q)
        self.current_worker.start()

    def on_clear_filters(self):
        if self.histogram and self.histogram.selector:
            self.histogram.selector.clear()
        if self.engine:
            self.engine.reset()
            self.status_var.set("Filters cleared.")

    def _poll_queue(self):
        try:
            while True:
                msg, payload = self.q.get_nowait()
                if msg == "done":
                    self._finish_load()
                    self._render(payload)
                    self.status_var.set(f"Loaded {len(payload)} responses, {len(payload.genres)} genres.")
                elif msg == "error":
                    self._finish_load()
                    logger.error("Dataset load failed: %s", payload)
                    self._clear_views()
                    self.status_var.set("Load failed.")
                    messagebox.showerror("Could not load dataset", payload)
                self.q.task_done()
        except queue.Empty:
            pass
        finally:
            self.after(100, self._poll_queue)

    def _finish_load(self):
        self.progress.stop()
        self.progress.configure(value=0)
        self.current_worker = None

    # ----- Views -----
    def _build_views(self):
        upper = ttk.Frame(self)
        upper.pack(side=tk.TOP, fill=tk.BOTH, expand=True, padx=10, pady=(10, 0))
        lower = ttk.Frame(self)
        lower.pack(side=tk.TOP, fill=tk.BOTH, expand=True, padx=10, pady=10)

        self.hist_fig = Figure(figsize=(6.4, 3.8), dpi=100, facecolor=BG)
        self.pie_fig = Figure(figsize=(6.4, 3.8), dpi=100, facecolor=BG)
        self.tree_fig = Figure(figsize=(12.8, 5.0), dpi=100, facecolor=BG)

        self.hist_canvas = FigureCanvasTkAgg(self.hist_fig, master=upper)
        self.hist_canvas.get_tk_widget().pack(side=tk.LEFT, fill=tk.BOTH, expand=True, padx=(0, 6))
        self.pie_canvas = FigureCanvasTkAgg(self.pie_fig, master=upper)
        self.pie_canvas.get_tk_widget().pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        self.tree_canvas = FigureCanvasTkAgg(self.tree_fig, master=lower)
        self.tree_canvas.get_tk_widget().pack(side=tk.TOP, fill=tk.BOTH, expand=True)

        self._clear_views()

    def _canvases(self):
        return (
            (self.hist_fig, self.hist_canvas),
            (self.pie_fig, self.pie_canvas),
            (self.tree_fig, self.tree_canvas),
        )

    def _clear_views(self):
        for canvas, cid in self._cids:
            canvas.mpl_disconnect(cid)
        self._cids = []
        if self.histogram and self.histogram.selector:
            self.histogram.selector.disconnect_events()
        self.histogram = self.pie = self.dendrogram = None
        self.engine = None
        self.clear_button.configure(state="disabled")

        for fig, canvas in self._canvases():
            fig.clear()
            ax = fig.add_subplot(111)
            ax.set_facecolor(BG)
            ax.axis('off')
            ax.text(0.5, 0.5, "Pending data", ha="center", va="center", color='white', fontsize=14)
            canvas.draw()

    def _render(self, store: RecordStore):
        self._clear_views()
        self.store = store
        palette = build_palette(store.genres)
        self.engine = FilterEngine(store)

        axes = []
        for fig, canvas in self._canvases():
            fig.clear()
            ax = fig.add_subplot(111)
            ax.set_facecolor(BG)
            axes.append(ax)
        hist_ax, pie_ax, tree_ax = axes
        self.pie_fig.subplots_adjust(right=0.7)

        self.histogram = HistogramView(hist_ax, store, DEFAULT_CONFIG)
        self.pie = PieView(pie_ax, store, palette, DEFAULT_CONFIG, fader=self._fader(self.pie_canvas))
        self.dendrogram = DendrogramView(tree_ax, store, palette, DEFAULT_CONFIG, fader=self._fader(self.tree_canvas))
        for view in (self.histogram, self.pie, self.dendrogram):
            view.draw()

        self.histogram.bind_brush(self.engine.on_brush)
        self._cids.append((self.pie_canvas, self.pie.bind_click(self.engine.on_slice_click)))
        self.engine.subscribe(self.pie.decorate)
        self.engine.subscribe(self.dendrogram.decorate)
        self.engine.subscribe(self._on_selection)

        self.pie.decorate(self.engine.state, animate=False)
        self.dendrogram.decorate(self.engine.state, animate=False)

        for view, canvas in ((self.histogram, self.hist_canvas), (self.pie, self.pie_canvas),
                             (self.dendrogram, self.tree_canvas)):
            self._bind_hover(view, canvas)
            canvas.draw()
        self.clear_button.configure(state="normal")

    def _fader(self, canvas) -> Fader:
        return Fader(canvas.draw_idle, self.after, DEFAULT_CONFIG.transition_ms, DEFAULT_CONFIG.transition_steps)

    def _on_selection(self, state):
        active = len(state.active_genres)
        pinned = state.selected_genre or "none"
        self.status_var.set(f"{active}/{len(state.genres)} genres active · pinned: {pinned}")

    def _bind_hover(self, view, canvas):
        tip = HoverTip(view.ax)

        def on_motion(event):
            if event.inaxes is not view.ax:
                if tip.hide():
                    canvas.draw_idle()
                return
            text: Optional[str] = view.hover_text(event)
            if text:
                tip.show(event.xdata, event.ydata, text)
                canvas.draw_idle()
            elif tip.hide():
                canvas.draw_idle()

        cid = canvas.mpl_connect("motion_notify_event", on_motion)
        self._cids.append((canvas, cid))


if __name__ == "__main__":
    setup_logging(os.environ.get("MOODMAPPR_LOG_LEVEL", "INFO"))
    app = MoodExplorer()
    app.mainloop()
