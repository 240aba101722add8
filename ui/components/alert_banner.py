import customtkinter as ctk
from models.budget import BudgetStatus
from utils.constants import BUDGET_STATUS_COLORS
from utils.currency import format_currency


class AlertBanner(ctk.CTkFrame):
    """Dismissible strip shown above the tabs when the budget needs attention."""

    def __init__(self, master, message: str, color: str,
                 action_text: str | None = None, action_cmd=None, **kwargs):
        super().__init__(master, fg_color=color, corner_radius=6, **kwargs)
        self.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            self, text=message, text_color="white", anchor="w", padx=10, pady=6,
        ).grid(row=0, column=0, sticky="ew")

        col = 1
        if action_text and action_cmd:
            ctk.CTkButton(
                self, text=action_text, width=60, height=24,
                fg_color="transparent", border_width=1, border_color="white",
                text_color="white", command=action_cmd,
            ).grid(row=0, column=col, padx=2)
            col += 1

        ctk.CTkButton(
            self, text="✕", width=28, height=24,
            fg_color="transparent", text_color="white",
            command=self.destroy,
        ).grid(row=0, column=col, padx=(2, 4))

    @classmethod
    def for_budget(cls, master, status: BudgetStatus, action_cmd=None) -> "AlertBanner | None":
        """Build a banner for a warning or exceeded budget; None when on track."""
        if status.status == "exceeded":
            over = format_currency(-status.remaining_amount)
            message = f"Budget exceeded by {over} this cycle ({status.statement_period.label})."
        elif status.status == "warning":
            message = (
                f"{status.percentage_used:.0f}% of this cycle's budget used. "
                f"{format_currency(status.remaining_amount)} left."
            )
        else:
            return None
        return cls(
            master, message, BUDGET_STATUS_COLORS[status.status],
            action_text="View", action_cmd=action_cmd,
        )
