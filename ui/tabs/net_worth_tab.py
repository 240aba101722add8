import logging
import threading
import customtkinter as ctk
from matplotlib.figure import Figure
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg

from services.card_service import CardService
from services.currency_service import CurrencyConversionError
from services.net_worth_service import NetWorthService
from ui.components.confirm_dialog import ConfirmDialog
from ui.components.net_worth_form import AssetForm, LiabilityForm
from utils.constants import SUPPORTED_CURRENCIES
from utils.currency import format_currency, short_amount
from utils.date_helpers import parse_date

logger = logging.getLogger(__name__)

_HISTORY_OPTIONS = {"12 snapshots": 12, "24 snapshots": 24, "All": None}


class NetWorthTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        net_worth_service: NetWorthService,
        card_service: CardService,
        notify_refresh,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = net_worth_service
        self._card_svc = card_service
        self._notify_refresh = notify_refresh
        self._history_var = ctk.StringVar(value="12 snapshots")
        self._load_gen = 0

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(3, weight=1)

        self._build_headline()
        self._build_breakdown()
        self._build_toolbar()
        self._build_chart()
        self._build_income_row()

        self.after(100, self._load)

    def refresh(self):
        self._load()

    # ── Layout builders ───────────────────────────────────────────────────────

    def _build_headline(self):
        card = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        card.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        card.grid_columnconfigure(0, weight=1)

        self._headline_amount = ctk.CTkLabel(card, text="", font=ctk.CTkFont(size=22, weight="bold"))
        self._headline_amount.pack(pady=(12, 2))
        self._headline_subtitle = ctk.CTkLabel(
            card, text="", font=ctk.CTkFont(size=12), text_color="gray60",
        )
        self._headline_subtitle.pack(pady=(0, 4))
        self._allocation_label = ctk.CTkLabel(
            card, text="", font=ctk.CTkFont(size=11), text_color="gray60",
        )
        self._allocation_label.pack(pady=(0, 10))

    def _build_breakdown(self):
        outer = ctk.CTkFrame(self, fg_color="transparent")
        outer.grid(row=1, column=0, sticky="ew", padx=8, pady=(8, 0))
        outer.grid_columnconfigure((0, 1), weight=1)

        self._assets_frame = ctk.CTkScrollableFrame(outer, label_text="ASSETS", height=150)
        self._assets_frame.grid(row=0, column=0, sticky="nsew", padx=(0, 4))
        self._assets_frame.grid_columnconfigure(0, weight=1)

        self._liab_frame = ctk.CTkScrollableFrame(outer, label_text="LIABILITIES", height=150)
        self._liab_frame.grid(row=0, column=1, sticky="nsew", padx=(4, 0))
        self._liab_frame.grid_columnconfigure(0, weight=1)

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color="transparent")
        bar.grid(row=2, column=0, sticky="ew", padx=8, pady=(8, 0))

        ctk.CTkButton(bar, text="+ Asset", width=80, command=self._add_asset).pack(side="left")
        ctk.CTkButton(bar, text="+ Liability", width=90, command=self._add_liability).pack(
            side="left", padx=4
        )
        ctk.CTkButton(
            bar, text="Take Snapshot", width=110,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._take_snapshot,
        ).pack(side="left", padx=4)

        ctk.CTkSegmentedButton(
            bar, values=list(_HISTORY_OPTIONS), variable=self._history_var,
            command=lambda _: self._load(),
        ).pack(side="right")
        ctk.CTkLabel(bar, text="History:").pack(side="right", padx=8)

    def _build_income_row(self):
        income = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        income.grid(row=4, column=0, sticky="ew", padx=8, pady=(0, 8))

        ctk.CTkLabel(income, text="Monthly income:").pack(side="left", padx=(12, 4), pady=6)
        self._income_amount_var = ctk.StringVar()
        ctk.CTkEntry(income, textvariable=self._income_amount_var, width=120).pack(side="left")
        self._income_currency_var = ctk.StringVar(value="VND")
        ctk.CTkComboBox(
            income, values=list(SUPPORTED_CURRENCIES), variable=self._income_currency_var,
            width=76, state="readonly",
        ).pack(side="left", padx=4)
        ctk.CTkLabel(income, text="on day").pack(side="left", padx=(8, 4))
        self._income_day_var = ctk.StringVar(value="1")
        ctk.CTkEntry(income, textvariable=self._income_day_var, width=44).pack(side="left")
        self._income_enabled_var = ctk.BooleanVar(value=True)
        ctk.CTkCheckBox(income, text="Enabled", variable=self._income_enabled_var).pack(
            side="left", padx=8
        )
        ctk.CTkButton(income, text="Save", width=60, command=self._save_income).pack(side="left")
        self._income_status = ctk.CTkLabel(income, text="", anchor="w")
        self._income_status.pack(side="left", padx=8)

    def _build_chart(self):
        outer = ctk.CTkFrame(self, fg_color=("gray90", "gray20"), corner_radius=8)
        outer.grid(row=3, column=0, sticky="nsew", padx=8, pady=8)
        self._fig = Figure(figsize=(6, 2.4), dpi=80, tight_layout=True)
        self._ax = self._fig.add_subplot(111)
        self._mpl = FigureCanvasTkAgg(self._fig, master=outer)
        self._mpl.get_tk_widget().pack(fill="both", expand=True, padx=8, pady=8)

    # ── Data loading ──────────────────────────────────────────────────────────

    def _load(self):
        self._load_gen += 1
        gen = self._load_gen
        limit = _HISTORY_OPTIONS[self._history_var.get()]

        def fetch():
            try:
                data = {
                    "totals": self._svc.calculate_net_worth(),
                    "assets": self._svc.get_assets(),
                    "liabilities": self._svc.get_liabilities(),
                    "balances": self._card_svc.get_balances(),
                    "allocation": self._svc.get_asset_allocation(),
                    "snapshots": self._svc.get_snapshots(limit),
                    "income": self._svc.get_recurring_income(),
                }
            except Exception:
                logger.exception("Failed to load net worth data")
                data = None
            self.after(0, lambda: self._on_data_ready(gen, data))

        threading.Thread(target=fetch, daemon=True).start()

    def _on_data_ready(self, gen: int, data: dict | None):
        if gen != self._load_gen or not self.winfo_exists() or data is None:
            return

        totals = data["totals"]
        net_worth = totals["net_worth"]
        self._headline_amount.configure(
            text=format_currency(net_worth),
            text_color="#4CAF50" if net_worth >= 0 else "#F44336",
        )
        self._headline_subtitle.configure(
            text=f"Assets {format_currency(totals['total_assets'])}  ·  "
                 f"Liabilities {format_currency(totals['total_liabilities'])}"
        )
        total_assets = totals["total_assets"] or 1
        self._allocation_label.configure(text="  ·  ".join(
            f"{a['type']} {a['amount'] / total_assets * 100:.0f}%" for a in data["allocation"]
        ))

        self._populate_panel(
            self._assets_frame,
            [(a.name, a.vnd_amount, lambda x=a: self._edit_asset(x)) for a in data["assets"]],
            totals["total_assets"], "#4CAF50",
        )
        self._populate_panel(
            self._liab_frame,
            [
                (l.name, self._svc.liability_total(l, data["balances"]),
                 lambda x=l: self._edit_liability(x))
                for l in data["liabilities"]
            ],
            totals["total_liabilities"], "#F44336",
        )

        income = data["income"]
        if income:
            self._income_amount_var.set(f"{income.amount:g}")
            self._income_currency_var.set(income.original_currency)
            self._income_day_var.set(str(income.day_of_month))
            self._income_enabled_var.set(income.is_enabled)

        self.after(50, lambda s=data["snapshots"]: self._draw_history(s))

    def _populate_panel(self, frame, rows: list[tuple], total: float, value_color: str):
        for w in frame.winfo_children():
            w.destroy()

        for i, (name, value, on_edit) in enumerate(rows):
            ctk.CTkButton(
                frame, text=name, anchor="w", fg_color="transparent",
                text_color=("gray10", "gray90"), hover_color=("gray80", "gray30"),
                command=on_edit,
            ).grid(row=i, column=0, sticky="ew", padx=(0, 8), pady=1)
            ctk.CTkLabel(
                frame, text=format_currency(value), text_color=value_color, anchor="e",
            ).grid(row=i, column=1, sticky="e", padx=4, pady=1)

        sep_row = len(rows)
        ctk.CTkFrame(frame, height=1, fg_color=("gray70", "gray40")).grid(
            row=sep_row, column=0, columnspan=2, sticky="ew", padx=4, pady=(4, 2)
        )
        ctk.CTkLabel(
            frame, text="Total", font=ctk.CTkFont(weight="bold"), anchor="w",
        ).grid(row=sep_row + 1, column=0, sticky="w", padx=(4, 8), pady=2)
        ctk.CTkLabel(
            frame, text=format_currency(total), text_color=value_color,
            font=ctk.CTkFont(weight="bold"), anchor="e",
        ).grid(row=sep_row + 1, column=1, sticky="e", padx=4, pady=2)

    # ── Chart drawing ─────────────────────────────────────────────────────────

    def _draw_history(self, snapshots):
        ax = self._ax
        ax.clear()
        is_dark = ctk.get_appearance_mode() == "Dark"
        bg = "#2b2b2b" if is_dark else "#e4e4e4"
        fg = "#aaaaaa" if is_dark else "#444444"
        self._fig.patch.set_facecolor(bg)
        ax.set_facecolor(bg)
        ax.tick_params(colors=fg, labelsize=8)

        points = [(parse_date(s.date), s.net_worth) for s in reversed(snapshots)]
        points = [(d, v) for d, v in points if d is not None]
        if not points:
            ax.text(0.5, 0.5, "No snapshots yet", ha="center", va="center",
                    transform=ax.transAxes, color="gray")
            self._mpl.draw_idle()
            return

        dates = [d for d, _ in points]
        values = [v for _, v in points]
        ax.plot(dates, values, marker="o", color="#2196F3")
        ax.axhline(0, color=fg, linewidth=0.8)
        ax.yaxis.set_major_formatter(lambda v, _: short_amount(v))
        self._fig.autofmt_xdate()
        self._mpl.draw_idle()

    # ── Actions ──────────────────────────────────────────────────────────────

    def _open(self, form):
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("net_worth")

    def _add_asset(self):
        self._open(AssetForm(self.winfo_toplevel(), self._svc))

    def _edit_asset(self, asset):
        self._open(AssetForm(self.winfo_toplevel(), self._svc, asset=asset))

    def _add_liability(self):
        self._open(LiabilityForm(self.winfo_toplevel(), self._svc, self._card_svc))

    def _edit_liability(self, liability):
        self._open(LiabilityForm(self.winfo_toplevel(), self._svc, self._card_svc, liability=liability))

    def _take_snapshot(self):
        dlg = ConfirmDialog(
            self.winfo_toplevel(), "Take Snapshot",
            "Record today's net worth in the history?",
            confirm_text="Record", destructive=False,
        )
        if dlg.result:
            self._svc.take_snapshot()
            self._load()

    def _save_income(self):
        try:
            amount = float(self._income_amount_var.get().replace(",", ""))
            day = int(self._income_day_var.get())
        except ValueError:
            self._income_status.configure(text="Amount and day must be numbers.", text_color="#F44336")
            return
        try:
            self._svc.set_recurring_income(
                amount, self._income_currency_var.get(), day, self._income_enabled_var.get()
            )
        except (ValueError, CurrencyConversionError) as e:
            self._income_status.configure(text=str(e), text_color="#F44336")
            return
        self._income_status.configure(text="Saved.", text_color="#4CAF50")
