import csv
import tkinter as tk
from tkinter import filedialog

import customtkinter as ctk
from matplotlib.figure import Figure
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg

from services.report_service import ReportService
from services.card_service import CardService
from utils.constants import CATEGORY_TOTAL_WINDOWS
from utils.currency import format_currency, short_amount
from utils.date_helpers import format_date, today

_ALL_CARDS = "All Cards"
_TREND_VIEWS = {"Daily": "day", "Weekly": "week", "Monthly": "month"}


class AnalyticsTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        report_service: ReportService,
        card_service: CardService,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._report_svc = report_service
        self._card_svc = card_service
        self._cards = []
        self._periods = []

        self._card_var = ctk.StringVar(value=_ALL_CARDS)
        self._cycle_var = ctk.StringVar()
        self._window_var = ctk.StringVar(value="30D")
        self._view_var = ctk.StringVar(value="Monthly")

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_toolbar()
        self._build_cycle_summary()
        self._build_charts()
        self._load()

    def refresh(self):
        self._load()

    # ── Layout ───────────────────────────────────────────────────────────────
    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkLabel(bar, text="Card:").pack(side="left", padx=(12, 4), pady=8)
        self._card_combo = ctk.CTkComboBox(
            bar, variable=self._card_var, width=160, state="readonly",
            command=lambda _: self._load(),
        )
        self._card_combo.pack(side="left", padx=(0, 12))

        ctk.CTkLabel(bar, text="Statement cycle:").pack(side="left", padx=(0, 4))
        self._cycle_combo = ctk.CTkComboBox(
            bar, variable=self._cycle_var, width=220, state="readonly",
            command=lambda _: self._load_cycle(),
        )
        self._cycle_combo.pack(side="left", padx=(0, 12))

        ctk.CTkButton(bar, text="Export CSV", command=self._export_csv).pack(side="right", padx=8)

    def _build_cycle_summary(self):
        self._summary_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._summary_frame.grid(row=1, column=0, sticky="ew", padx=16, pady=10)
        self._summary_frame.grid_columnconfigure((0, 1), weight=1)

    def _build_charts(self):
        charts = ctk.CTkFrame(self, fg_color="transparent")
        charts.grid(row=2, column=0, sticky="nsew", padx=16, pady=(0, 12))
        charts.grid_columnconfigure(0, weight=3)
        charts.grid_columnconfigure(1, weight=2)
        charts.grid_rowconfigure(0, weight=1)

        # Spending trends
        bar_outer = ctk.CTkFrame(charts, fg_color=("gray90", "gray20"), corner_radius=8)
        bar_outer.grid(row=0, column=0, sticky="nsew", padx=(0, 8))
        head = ctk.CTkFrame(bar_outer, fg_color="transparent")
        head.pack(fill="x", padx=10, pady=(10, 0))
        ctk.CTkLabel(
            head, text="Spending Trends", font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(side="left")
        ctk.CTkSegmentedButton(
            head, values=list(_TREND_VIEWS), variable=self._view_var,
            command=lambda _: self.after(50, self._draw_trends),
        ).pack(side="right")
        self._bar_fig = Figure(figsize=(5, 3), dpi=80, tight_layout=True)
        self._bar_ax = self._bar_fig.add_subplot(111)
        self._bar_mpl = FigureCanvasTkAgg(self._bar_fig, master=bar_outer)
        self._bar_mpl.get_tk_widget().pack(fill="both", expand=True, padx=8, pady=(4, 10))

        # Category breakdown
        pie_outer = ctk.CTkFrame(charts, fg_color=("gray90", "gray20"), corner_radius=8)
        pie_outer.grid(row=0, column=1, sticky="nsew")
        head = ctk.CTkFrame(pie_outer, fg_color="transparent")
        head.pack(fill="x", padx=10, pady=(10, 0))
        ctk.CTkLabel(
            head, text="By Category", font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(side="left")
        ctk.CTkSegmentedButton(
            head, values=list(CATEGORY_TOTAL_WINDOWS), variable=self._window_var,
            command=lambda _: self._load_categories(),
        ).pack(side="right")
        self._pie_fig = Figure(figsize=(3, 3), dpi=80, tight_layout=True)
        self._pie_ax = self._pie_fig.add_subplot(111)
        self._pie_mpl = FigureCanvasTkAgg(self._pie_fig, master=pie_outer)
        self._pie_mpl.get_tk_widget().pack(fill="both", expand=True, padx=8, pady=(4, 10))
        self._legend_frame = ctk.CTkFrame(pie_outer, fg_color="transparent")
        self._legend_frame.pack(fill="x", padx=8, pady=(0, 8))

    def _style_ax(self, ax, fig):
        is_dark = ctk.get_appearance_mode() == "Dark"
        bg = "#2b2b2b" if is_dark else "#e4e4e4"
        fg = "#aaaaaa" if is_dark else "#444444"
        fig.patch.set_facecolor(bg)
        ax.set_facecolor(bg)
        ax.tick_params(colors=fg, labelsize=8)
        for spine in ax.spines.values():
            spine.set_edgecolor(fg)

    # ── Data ─────────────────────────────────────────────────────────────────
    def _selected_card_id(self) -> int | None:
        card = next((c for c in self._cards if c.name == self._card_var.get()), None)
        return card.id if card else None

    def _load(self):
        self._cards = self._card_svc.get_all()
        names = [_ALL_CARDS] + [c.name for c in self._cards]
        self._card_combo.configure(values=names)
        if self._card_var.get() not in names:
            self._card_var.set(_ALL_CARDS)

        self._periods = self._report_svc.get_cycle_options(self._selected_card_id())
        labels = [p.label for p in self._periods]
        self._cycle_combo.configure(values=labels)
        if self._cycle_var.get() not in labels:
            self._cycle_var.set(labels[0] if labels else "")

        self._load_cycle()
        self._load_categories()
        self.after(50, self._draw_trends)

    def _load_cycle(self):
        for w in self._summary_frame.winfo_children():
            w.destroy()
        period = next((p for p in self._periods if p.label == self._cycle_var.get()), None)
        if period is None:
            ctk.CTkLabel(
                self._summary_frame, text="Add a card to see statement cycles.",
                text_color="gray60",
            ).grid(row=0, column=0, columnspan=2)
            return

        card_id = self._selected_card_id()
        spent = self._report_svc.get_cycle_spending(period, card_id)
        count = len(self._report_svc.get_cycle_transactions(period, card_id))
        for i, (label, text) in enumerate([
            (f"Spent {period.label}", format_currency(spent)),
            ("Transactions", str(count)),
        ]):
            card = ctk.CTkFrame(self._summary_frame, fg_color=("gray90", "gray20"), corner_radius=10)
            card.grid(row=0, column=i, padx=6, sticky="ew")
            ctk.CTkLabel(card, text=label, text_color="gray60").pack(pady=(10, 0), padx=16)
            ctk.CTkLabel(
                card, text=text, font=ctk.CTkFont(size=18, weight="bold"),
            ).pack(pady=(4, 10), padx=16)

    def _load_categories(self):
        days = CATEGORY_TOTAL_WINDOWS[self._window_var.get()]
        totals = self._report_svc.get_category_totals(days=days)
        self.after(50, lambda t=totals: self._draw_pie(t))

        for w in self._legend_frame.winfo_children():
            w.destroy()
        for item in totals[:8]:
            row = ctk.CTkFrame(self._legend_frame, fg_color="transparent")
            row.pack(fill="x", pady=1)
            tk.Label(row, bg=item["color_hex"], width=2).pack(side="left", padx=(0, 4))
            ctk.CTkLabel(
                row, text=f"{item['category']}: {format_currency(item['total'])}",
                anchor="w", font=ctk.CTkFont(size=11),
            ).pack(side="left")

    # ── Charts ───────────────────────────────────────────────────────────────
    def _draw_trends(self):
        ax = self._bar_ax
        ax.clear()
        self._style_ax(ax, self._bar_fig)

        data = self._report_svc.get_spending_trends(_TREND_VIEWS[self._view_var.get()])[-12:]
        if not data:
            ax.text(0.5, 0.5, "No data", ha="center", va="center",
                    transform=ax.transAxes, color="gray")
            self._bar_mpl.draw_idle()
            return

        x = list(range(len(data)))
        ax.bar(x, [d["amount"] for d in data], 0.6, color="#2196F3")
        ax.set_xticks(x)
        ax.set_xticklabels([d["label"] for d in data], rotation=30, ha="right")
        ax.yaxis.set_major_formatter(lambda v, _: short_amount(v))
        self._bar_mpl.draw_idle()

    def _draw_pie(self, totals):
        ax = self._pie_ax
        ax.clear()
        self._style_ax(ax, self._pie_fig)

        if not totals or sum(d["total"] for d in totals) == 0:
            ax.text(0.5, 0.5, "No spending data", ha="center", va="center",
                    transform=ax.transAxes, color="gray")
            self._pie_mpl.draw_idle()
            return

        ax.pie(
            [d["total"] for d in totals],
            colors=[d["color_hex"] for d in totals],
            startangle=90,
        )
        ax.set_aspect("equal")
        self._pie_mpl.draw_idle()

    def _export_csv(self):
        path = filedialog.asksaveasfilename(
            defaultextension=".csv",
            filetypes=[("CSV files", "*.csv")],
            initialfile=f"transactions_{format_date(today())}.csv",
        )
        if not path:
            return
        rows = self._report_svc.export_csv()
        with open(path, "w", newline="", encoding="utf-8") as f:
            csv.writer(f).writerows(rows)
