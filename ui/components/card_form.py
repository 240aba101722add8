import customtkinter as ctk
from services.card_service import CardService
from models.card import Card, MIN_CYCLE_DAY, MAX_CYCLE_DAY

_DAY_VALUES = [str(d) for d in range(MIN_CYCLE_DAY, MAX_CYCLE_DAY + 1)]


class CardForm(ctk.CTkToplevel):
    """Add or edit a credit card. Sets self.saved = True on success."""

    def __init__(
        self,
        master,
        card_service: CardService,
        card: Card | None = None,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = card_service
        self._card = card
        self.saved = False

        self.title("Edit Card" if card else "New Card")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        # Row 0: Name
        ctk.CTkLabel(self, text="Name:").grid(
            row=0, column=0, padx=(16, 8), pady=(16, 4), sticky="e"
        )
        self._name_var = ctk.StringVar(value=card.name if card else "")
        self._name_entry = ctk.CTkEntry(self, textvariable=self._name_var, width=220)
        self._name_entry.grid(row=0, column=1, padx=(0, 16), pady=(16, 4), sticky="ew")

        # Row 1: Statement day
        ctk.CTkLabel(self, text="Statement day:").grid(
            row=1, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        self._statement_var = ctk.StringVar(value=str(card.statement_day) if card else "1")
        ctk.CTkComboBox(
            self, values=_DAY_VALUES, variable=self._statement_var, width=80,
        ).grid(row=1, column=1, padx=(0, 16), pady=4, sticky="w")

        # Row 2: Due day
        ctk.CTkLabel(self, text="Payment due day:").grid(
            row=2, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        self._due_var = ctk.StringVar(value=str(card.due_day) if card else "25")
        ctk.CTkComboBox(
            self, values=_DAY_VALUES, variable=self._due_var, width=80,
        ).grid(row=2, column=1, padx=(0, 16), pady=4, sticky="w")

        ctk.CTkLabel(
            self,
            text="Days past the end of a short month fall on its last day.",
            text_color="gray60", font=ctk.CTkFont(size=11),
        ).grid(row=3, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="w")

        # Row 4: Error label
        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var, text_color="#F44336",
            wraplength=280, anchor="w",
        ).grid(row=4, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")

        # Row 5: Buttons
        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=5, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")

        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")

        if card:
            ctk.CTkButton(
                btn_frame, text="Delete Card", width=100,
                fg_color="#F44336", hover_color="#D32F2F",
                command=self._on_delete,
            ).pack(side="left", padx=8)

        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        self._center()
        self._name_entry.focus_set()

    def _on_save(self):
        try:
            statement_day = int(self._statement_var.get())
            due_day = int(self._due_var.get())
        except ValueError:
            self._error_var.set("Days must be whole numbers.")
            return

        name = self._name_var.get()
        try:
            if self._card:
                self._svc.update(self._card.id, name, statement_day, due_day)
            else:
                self._svc.create(name, statement_day, due_day)
            self.saved = True
            self.destroy()
        except ValueError as e:
            self._error_var.set(str(e))

    def _on_delete(self):
        try:
            self._svc.delete(self._card.id)
            self.saved = True
            self.destroy()
        except ValueError as e:
            self._error_var.set(str(e))

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
