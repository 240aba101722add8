import customtkinter as ctk
from services.transaction_service import TransactionService
from services.budget_service import BudgetService
from services.card_service import CardService
from services.report_service import ReportService
from utils.constants import BUDGET_STATUS_COLORS, BUDGET_STATUS_LABELS
from utils.currency import format_currency
from utils.date_helpers import format_display_date

_RECENT_COUNT = 10


class DashboardTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        tx_service: TransactionService,
        budget_service: BudgetService,
        card_service: CardService,
        report_service: ReportService,
        date_format: str = "DD/MM/YYYY",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._tx_svc = tx_service
        self._budget_svc = budget_service
        self._card_svc = card_service
        self._report_svc = report_service
        self._date_format = date_format

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_summary_cards()
        self._build_budget_strip()
        self._build_bottom_section()
        self._load()

    def refresh(self):
        self._load()

    def _build_summary_cards(self):
        self._card_frame = ctk.CTkFrame(self, fg_color="transparent")
        self._card_frame.grid(row=0, column=0, sticky="ew", padx=16, pady=(12, 6))
        self._card_frame.grid_columnconfigure((0, 1, 2, 3), weight=1)

    def _build_budget_strip(self):
        strip = ctk.CTkFrame(self, fg_color=("gray90", "gray20"), corner_radius=10)
        strip.grid(row=1, column=0, sticky="ew", padx=22, pady=6)
        strip.grid_columnconfigure(0, weight=1)
        self._budget_title = ctk.CTkLabel(
            strip, text="", anchor="w", font=ctk.CTkFont(size=13, weight="bold"),
        )
        self._budget_title.grid(row=0, column=0, sticky="ew", padx=12, pady=(10, 0))
        self._budget_detail = ctk.CTkLabel(strip, text="", anchor="w", text_color="gray60")
        self._budget_detail.grid(row=1, column=0, sticky="ew", padx=12)
        self._budget_bar = ctk.CTkProgressBar(strip)
        self._budget_bar.grid(row=2, column=0, sticky="ew", padx=12, pady=(4, 12))

    def _build_bottom_section(self):
        bottom = ctk.CTkFrame(self, fg_color="transparent")
        bottom.grid(row=2, column=0, sticky="nsew", padx=16, pady=(6, 12))
        bottom.grid_columnconfigure((0, 1), weight=1)
        bottom.grid_rowconfigure(0, weight=1)

        self._recent_frame = ctk.CTkScrollableFrame(
            bottom, label_text="Recent Transactions", height=240
        )
        self._recent_frame.grid(row=0, column=0, sticky="nsew", padx=(0, 8))

        self._cycles_frame = ctk.CTkScrollableFrame(
            bottom, label_text="Current Statement Cycles", height=240
        )
        self._cycles_frame.grid(row=0, column=1, sticky="nsew", padx=(8, 0))

    def _load(self):
        self._load_summary()
        self._load_budget()
        self._load_recent()
        self._load_cycles()

    def _load_summary(self):
        for w in self._card_frame.winfo_children():
            w.destroy()
        summary = self._report_svc.get_dashboard_summary()

        change = summary["change_pct"]
        if change is None:
            change_text, change_color = "n/a", "gray60"
        else:
            change_text = f"{change:+.1f}%"
            change_color = "#F44336" if change > 0 else "#4CAF50"

        top = summary["top_category"] or "—"
        cards = [
            ("Spent This Month", format_currency(summary["this_month"]), "#2196F3"),
            ("Last Month", format_currency(summary["last_month"]), "gray60"),
            ("Change", change_text, change_color),
            ("Top Category", f"{top} ({summary['transaction_count']} txns)", "#9C27B0"),
        ]
        for i, (label, text, color) in enumerate(cards):
            self._make_card(self._card_frame, i, label, text, color)

    def _load_budget(self):
        status = self._budget_svc.get_budget_status()
        if status is None:
            self._budget_title.configure(text="No active budget", text_color=("gray10", "gray90"))
            self._budget_detail.configure(text="Set a monthly budget on the Budget tab.")
            self._budget_bar.set(0)
            self._budget_bar.configure(progress_color="gray50")
            return

        color = BUDGET_STATUS_COLORS[status.status]
        self._budget_title.configure(
            text=f"Budget: {BUDGET_STATUS_LABELS[status.status]} ({status.percentage_used:.0f}%)",
            text_color=color,
        )
        self._budget_detail.configure(
            text=(
                f"{status.statement_period.label}  |  "
                f"Spent {format_currency(status.current_spending)}  |  "
                f"Remaining {format_currency(status.remaining_amount)}"
            )
        )
        self._budget_bar.configure(progress_color=color)
        self._budget_bar.set(min(status.percentage_used / 100, 1.0))

    def _load_recent(self):
        for w in self._recent_frame.winfo_children():
            w.destroy()
        recent = self._tx_svc.get_all()[:_RECENT_COUNT]
        if not recent:
            ctk.CTkLabel(
                self._recent_frame, text="No transactions yet.", text_color="gray60",
            ).pack(pady=20)
            return
        for idx, tx in enumerate(recent):
            bg = ("gray90", "gray20") if idx % 2 == 0 else ("gray86", "gray24")
            f = ctk.CTkFrame(self._recent_frame, fg_color=bg, corner_radius=4)
            f.pack(fill="x", pady=1)
            f.grid_columnconfigure(1, weight=1)
            ctk.CTkLabel(
                f, text=format_display_date(tx.date, self._date_format), width=85, anchor="w"
            ).grid(row=0, column=0, padx=6, pady=3)
            ctk.CTkLabel(
                f, text=tx.description or tx.category_name or tx.card_name, anchor="w"
            ).grid(row=0, column=1, padx=4, sticky="ew")
            ctk.CTkLabel(
                f, text=format_currency(tx.amount, tx.currency),
                text_color="#F44336", anchor="e", width=110,
            ).grid(row=0, column=2, padx=6)

    def _load_cycles(self):
        for w in self._cycles_frame.winfo_children():
            w.destroy()
        cards = self._card_svc.get_all()
        if not cards:
            ctk.CTkLabel(
                self._cycles_frame, text="Add a card to track statement cycles.",
                text_color="gray60",
            ).pack(pady=20)
            return
        for card in cards:
            period, spent = self._card_svc.get_current_cycle(card.id)
            f = ctk.CTkFrame(self._cycles_frame, fg_color="transparent")
            f.pack(fill="x", pady=4, padx=4)
            ctk.CTkLabel(f, text=card.name, anchor="w").pack(side="left")
            ctk.CTkLabel(
                f, text=format_currency(spent), anchor="e",
            ).pack(side="right")
            ctk.CTkLabel(
                f, text=period.label,
                anchor="e", text_color="gray60",
            ).pack(side="right", padx=8)

    def _make_card(self, parent, col, label, text, color):
        card = ctk.CTkFrame(parent, fg_color=("gray90", "gray20"), corner_radius=10)
        card.grid(row=0, column=col, padx=6, sticky="ew")
        card.grid_columnconfigure(0, weight=1)
        ctk.CTkLabel(
            card, text=label, font=ctk.CTkFont(size=12), text_color="gray60",
        ).grid(row=0, column=0, pady=(12, 0), padx=16)
        ctk.CTkLabel(
            card, text=text, font=ctk.CTkFont(size=18, weight="bold"), text_color=color,
        ).grid(row=1, column=0, pady=(4, 12), padx=16)
