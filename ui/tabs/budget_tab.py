import customtkinter as ctk
from services.budget_service import BudgetService
from services.card_service import CardService
from ui.components.budget_form import BudgetForm
from utils.constants import BUDGET_STATUS_COLORS, BUDGET_STATUS_LABELS, BUDGET_WARNING_PCT
from utils.currency import format_currency


class BudgetTab(ctk.CTkFrame):
    """Monthly budget that resets on the chosen card's statement day."""

    def __init__(
        self,
        master,
        budget_service: BudgetService,
        card_service: CardService,
        notify_refresh,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = budget_service
        self._card_svc = card_service
        self._notify_refresh = notify_refresh

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_toolbar()
        self._build_body()
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkLabel(
            bar, text="Monthly Budget", font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(side="left", padx=(12, 16), pady=8)
        self._edit_btn = ctk.CTkButton(bar, text="Set Budget", command=self._open_form)
        self._edit_btn.pack(side="left", padx=4, pady=6)

    def _build_body(self):
        self._body = ctk.CTkFrame(self, fg_color="transparent")
        self._body.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._body.grid_columnconfigure(0, weight=1)

    def _load(self):
        for w in self._body.winfo_children():
            w.destroy()

        budget = self._svc.get_budget()
        self._edit_btn.configure(text="Edit Budget" if budget else "Set Budget")
        if budget is None:
            self._message("No budget set. Click 'Set Budget' to create one.")
            return
        if not budget.enabled:
            self._message(
                f"Budget of {format_currency(budget.monthly_amount)} is switched off."
            )
            return

        status = self._svc.get_budget_status()
        if status is None:
            self._message("Choose a statement card to start tracking this budget.")
            return

        card = self._card_svc.get_by_id(budget.statement_card_id)
        color = BUDGET_STATUS_COLORS[status.status]

        panel = ctk.CTkFrame(self._body, fg_color=("gray90", "gray20"), corner_radius=10)
        panel.grid(row=0, column=0, sticky="ew", padx=4, pady=4)
        panel.grid_columnconfigure((0, 1, 2), weight=1)

        ctk.CTkLabel(
            panel, text=BUDGET_STATUS_LABELS[status.status],
            font=ctk.CTkFont(size=20, weight="bold"), text_color=color,
        ).grid(row=0, column=0, columnspan=3, pady=(14, 0))
        ctk.CTkLabel(
            panel,
            text=f"Statement cycle {status.statement_period.label} ({card.name})",
            text_color="gray60",
        ).grid(row=1, column=0, columnspan=3)

        for col, (label, value) in enumerate([
            ("Budget", budget.monthly_amount),
            ("Spent", status.current_spending),
            ("Remaining", status.remaining_amount),
        ]):
            cell = ctk.CTkFrame(panel, fg_color="transparent")
            cell.grid(row=2, column=col, pady=10)
            ctk.CTkLabel(cell, text=label, text_color="gray60").pack()
            ctk.CTkLabel(
                cell, text=format_currency(value),
                font=ctk.CTkFont(size=16, weight="bold"),
                text_color="#F44336" if value < 0 else ("gray10", "gray90"),
            ).pack()

        bar = ctk.CTkProgressBar(panel, progress_color=color, height=14)
        bar.grid(row=3, column=0, columnspan=3, sticky="ew", padx=16)
        bar.set(min(status.percentage_used / 100, 1.0))
        ctk.CTkLabel(
            panel,
            text=f"{status.percentage_used:.1f}% used  ·  warning from {BUDGET_WARNING_PCT:.0f}%",
            text_color="gray60",
        ).grid(row=4, column=0, columnspan=3, pady=(4, 14))

    def _message(self, text: str):
        ctk.CTkLabel(self._body, text=text, text_color="gray60").grid(row=0, column=0, pady=40)

    def _open_form(self):
        form = BudgetForm(
            self.winfo_toplevel(), self._svc, self._card_svc, budget=self._svc.get_budget()
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("budget")
