import customtkinter as ctk
from services.budget_service import BudgetService
from services.card_service import CardService
from models.budget import Budget


class BudgetForm(ctk.CTkToplevel):
    """Set the monthly budget and the card whose statement cycle it follows."""

    def __init__(
        self,
        master,
        budget_service: BudgetService,
        card_service: CardService,
        budget: Budget | None = None,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = budget_service
        self.saved = False

        self.title("Monthly Budget")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        self._cards = card_service.get_all()
        card_names = [c.name for c in self._cards]

        r = 0
        ctk.CTkLabel(self, text="Enabled:").grid(
            row=r, column=0, padx=(16, 8), pady=(16, 4), sticky="e"
        )
        self._enabled_var = ctk.BooleanVar(value=budget.enabled if budget else True)
        ctk.CTkSwitch(self, text="", variable=self._enabled_var).grid(
            row=r, column=1, padx=(0, 16), pady=(16, 4), sticky="w"
        )
        r += 1

        ctk.CTkLabel(self, text="Monthly amount (₫):").grid(
            row=r, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        self._amount_var = ctk.StringVar(
            value=f"{budget.monthly_amount:.0f}" if budget else ""
        )
        ctk.CTkEntry(self, textvariable=self._amount_var, width=200).grid(
            row=r, column=1, padx=(0, 16), pady=4, sticky="ew"
        )
        r += 1

        ctk.CTkLabel(self, text="Statement card:").grid(
            row=r, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        current = next(
            (c.name for c in self._cards if budget and c.id == budget.statement_card_id),
            card_names[0] if card_names else "",
        )
        self._card_var = ctk.StringVar(value=current)
        ctk.CTkComboBox(
            self, values=card_names, variable=self._card_var, width=200, state="readonly",
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        ctk.CTkLabel(
            self,
            text="The budget resets on this card's statement day each month.",
            text_color="gray60", font=ctk.CTkFont(size=11), wraplength=300, anchor="w",
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=300, anchor="w",
        ).grid(row=r, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        r += 1

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=r, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        if budget:
            ctk.CTkButton(
                btn_frame, text="Remove", width=80,
                fg_color="#F44336", hover_color="#D32F2F",
                command=self._on_clear,
            ).pack(side="left", padx=8)
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        self._center()

    def _on_save(self):
        try:
            amount = float(self._amount_var.get().replace(",", "") or 0)
        except ValueError:
            self._error_var.set("Invalid amount.")
            return
        card = next((c for c in self._cards if c.name == self._card_var.get()), None)
        try:
            self._svc.save_budget(self._enabled_var.get(), amount, card.id if card else None)
            self.saved = True
            self.destroy()
        except ValueError as e:
            self._error_var.set(str(e))

    def _on_clear(self):
        self._svc.clear_budget()
        self.saved = True
        self.destroy()

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
