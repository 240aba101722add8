import customtkinter as ctk
from services.card_service import CardService
from ui.components.card_form import CardForm
from ui.components.confirm_dialog import ConfirmDialog
from utils.currency import format_currency


class CardsTab(ctk.CTkFrame):
    def __init__(self, master, card_service: CardService, notify_refresh, **kwargs):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._svc = card_service
        self._notify_refresh = notify_refresh

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=1)

        self._build_toolbar()
        self._build_list()
        self._load()

    def refresh(self):
        self._load()

    def _build_toolbar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        ctk.CTkLabel(
            bar, text="Credit Cards", font=ctk.CTkFont(size=13, weight="bold"),
        ).pack(side="left", padx=(12, 16), pady=8)
        ctk.CTkButton(bar, text="+ Add Card", command=self._open_add).pack(side="left", padx=4, pady=6)

    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)
        self._scroll.grid_columnconfigure(0, weight=1)

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()

        cards = self._svc.get_all()
        if not cards:
            ctk.CTkLabel(
                self._scroll,
                text="No cards yet. Click '+ Add Card' to add your first credit card.",
                text_color="gray60",
            ).grid(row=0, column=0, pady=40)
            return

        balances = self._svc.get_balances()
        for idx, card in enumerate(cards):
            period, spent = self._svc.get_current_cycle(card.id)
            self._add_card_row(idx, card, period, spent, balances.get(card.id, 0.0))

    def _add_card_row(self, idx, card, period, spent, balance):
        row = ctk.CTkFrame(self._scroll, fg_color=("gray90", "gray20"), corner_radius=8)
        row.grid(row=idx, column=0, sticky="ew", padx=4, pady=4)
        row.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            row, text=card.name, font=ctk.CTkFont(size=14, weight="bold"), anchor="w",
        ).grid(row=0, column=0, sticky="w", padx=12, pady=(10, 0))
        ctk.CTkLabel(
            row,
            text=f"Statement day {card.statement_day}  ·  Payment due day {card.due_day}",
            text_color="gray60", anchor="w",
        ).grid(row=1, column=0, sticky="w", padx=12)
        ctk.CTkLabel(
            row,
            text=f"Current cycle {period.label}: {format_currency(spent)}",
            anchor="w",
        ).grid(row=2, column=0, sticky="w", padx=12, pady=(2, 10))

        ctk.CTkLabel(
            row, text=format_currency(balance),
            font=ctk.CTkFont(size=16, weight="bold"), text_color="#F44336",
        ).grid(row=0, column=1, rowspan=2, padx=12)

        btns = ctk.CTkFrame(row, fg_color="transparent")
        btns.grid(row=2, column=1, padx=12, pady=(0, 10), sticky="e")
        ctk.CTkButton(
            btns, text="Edit", width=60, height=26,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda c=card: self._open_edit(c),
        ).pack(side="left", padx=(0, 4))
        ctk.CTkButton(
            btns, text="Delete", width=65, height=26,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda c=card: self._on_delete(c),
        ).pack(side="left")

    def _open_add(self):
        form = CardForm(self.winfo_toplevel(), self._svc)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("card")

    def _open_edit(self, card):
        form = CardForm(self.winfo_toplevel(), self._svc, card=card)
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("card")

    def _on_delete(self, card):
        dlg = ConfirmDialog(self.winfo_toplevel(), "Delete Card", f"Delete '{card.name}'?")
        if not dlg.result:
            return
        try:
            self._svc.delete(card.id)
        except ValueError as e:
            ConfirmDialog(
                self.winfo_toplevel(), "Cannot Delete", str(e),
                confirm_text="OK", destructive=False,
            )
            return
        self._notify_refresh("card")
