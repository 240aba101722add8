import customtkinter as ctk
from services.transaction_service import TransactionService
from services.card_service import CardService
from services.category_service import CategoryService
from services.budget_service import BudgetService
from models.transaction import Transaction
from ui.components.transaction_form import TransactionForm
from ui.components.confirm_dialog import ConfirmDialog
from utils.currency import format_currency
from utils.date_helpers import format_display_date, friendly_month

_MAX_RENDERED_ROWS = 100
_ALL = "All"
_PERIOD_LABELS = {
    _ALL: None,
    "Today": "today",
    "This Week": "current-week",
    "This Month": "current-month",
    "Last Month": "last-month",
    "Last 3 Months": "last-3-months",
}


class TransactionsTab(ctk.CTkFrame):
    def __init__(
        self,
        master,
        tx_service: TransactionService,
        card_service: CardService,
        category_service: CategoryService,
        budget_service: BudgetService,
        notify_refresh,         # callable
        get_default_currency,   # callable → str
        date_format: str = "DD/MM/YYYY",
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._tx_svc = tx_service
        self._card_svc = card_service
        self._cat_svc = category_service
        self._budget_svc = budget_service
        self._notify_refresh = notify_refresh
        self._get_default_currency = get_default_currency
        self._date_format = date_format

        self._period_var = ctk.StringVar(value="This Month")
        self._card_var = ctk.StringVar(value=_ALL)
        self._cat_var = ctk.StringVar(value=_ALL)
        self._search_var = ctk.StringVar()
        self._search_var.trace_add("write", lambda *_: self._load())

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(2, weight=1)

        self._build_filter_bar()
        self._build_header()
        self._build_list()
        self._load()

    def refresh(self):
        self._load()

    # ── Filter bar ──────────────────────────────────────────────────────────
    def _build_filter_bar(self):
        bar = ctk.CTkFrame(self, fg_color=("gray88", "gray18"), corner_radius=8)
        bar.grid(row=0, column=0, sticky="ew", padx=8, pady=(8, 0))
        bar.grid_columnconfigure(4, weight=1)

        ctk.CTkSegmentedButton(
            bar, values=list(_PERIOD_LABELS), variable=self._period_var,
            command=lambda _: self._load(),
        ).grid(row=0, column=0, padx=8, pady=6)

        self._card_combo = ctk.CTkComboBox(
            bar, variable=self._card_var, width=140, state="readonly",
            command=lambda _: self._load(),
        )
        self._card_combo.grid(row=0, column=1, padx=4)

        self._cat_combo = ctk.CTkComboBox(
            bar, variable=self._cat_var, width=140, state="readonly",
            command=lambda _: self._load(),
        )
        self._cat_combo.grid(row=0, column=2, padx=4)

        ctk.CTkEntry(
            bar, textvariable=self._search_var, placeholder_text="Search…", width=160,
        ).grid(row=0, column=3, padx=8)

        ctk.CTkButton(
            bar, text="+ Transaction", width=110, command=self._open_add_form,
        ).grid(row=0, column=5, padx=(0, 8))

    def _sync_filter_choices(self):
        self._cards = self._card_svc.get_all()
        self._cats = self._cat_svc.get_all()
        card_names = [_ALL] + [c.name for c in self._cards]
        cat_names = [_ALL] + [c.name for c in self._cats]
        self._card_combo.configure(values=card_names)
        self._cat_combo.configure(values=cat_names)
        if self._card_var.get() not in card_names:
            self._card_var.set(_ALL)
        if self._cat_var.get() not in cat_names:
            self._cat_var.set(_ALL)

    # ── Column headers ───────────────────────────────────────────────────────
    def _build_header(self):
        hdr = ctk.CTkFrame(self, fg_color=("gray82", "gray22"), corner_radius=0)
        hdr.grid(row=1, column=0, sticky="ew", padx=8, pady=(4, 0))
        cols = [("Date", 85), ("Card", 110), ("Category", 120), ("Description", 180),
                ("Amount", 110), ("In ₫", 110), ("Budget", 60), ("Actions", 100)]
        for i, (label, width) in enumerate(cols):
            ctk.CTkLabel(
                hdr, text=label, width=width, anchor="w", font=ctk.CTkFont(weight="bold"),
            ).grid(row=0, column=i, padx=4, pady=4, sticky="w")

    # ── List ─────────────────────────────────────────────────────────────────
    def _build_list(self):
        self._scroll = ctk.CTkScrollableFrame(self)
        self._scroll.grid(row=2, column=0, sticky="nsew", padx=8, pady=(0, 8))
        self._scroll.grid_columnconfigure(0, weight=1)

    def _load(self):
        for w in self._scroll.winfo_children():
            w.destroy()
        self._sync_filter_choices()

        card = next((c for c in self._cards if c.name == self._card_var.get()), None)
        cat = next((c for c in self._cats if c.name == self._cat_var.get()), None)
        transactions = self._tx_svc.get_all(
            period=_PERIOD_LABELS.get(self._period_var.get()),
            card_id=card.id if card else None,
            category_id=cat.id if cat else None,
            search=self._search_var.get().strip() or None,
        )

        if not transactions:
            ctk.CTkLabel(
                self._scroll, text="No transactions for this period.", text_color="gray60",
            ).grid(row=0, column=0, pady=20)
            return

        total = len(transactions)
        groups = self._tx_svc.group_by_month(transactions[:_MAX_RENDERED_ROWS])
        row = 0
        for month, (items, month_total) in groups.items():
            title = friendly_month(month) if month != "unknown" else "Unknown date"
            ctk.CTkLabel(
                self._scroll, text=f"{title}  ·  {format_currency(month_total)}",
                anchor="w", font=ctk.CTkFont(size=12, weight="bold"),
            ).grid(row=row, column=0, sticky="ew", padx=4, pady=(8, 2))
            row += 1
            for idx, tx in enumerate(items):
                self._add_row(row, idx, tx)
                row += 1

        if total > _MAX_RENDERED_ROWS:
            ctk.CTkLabel(
                self._scroll,
                text=f"Showing {_MAX_RENDERED_ROWS} of {total} transactions. Use filters or search to narrow results.",
                text_color="gray60", font=ctk.CTkFont(size=11),
            ).grid(row=row, column=0, pady=8)

    def _add_row(self, grid_row: int, idx: int, tx: Transaction):
        bg = ("gray92", "gray17") if idx % 2 == 0 else ("gray88", "gray21")
        row = ctk.CTkFrame(self._scroll, fg_color=bg, corner_radius=4)
        row.grid(row=grid_row, column=0, sticky="ew", pady=1, padx=2)

        ctk.CTkLabel(
            row, text=format_display_date(tx.date, self._date_format), width=85, anchor="w"
        ).grid(row=0, column=0, padx=4, pady=4)
        ctk.CTkLabel(row, text=tx.card_name, width=110, anchor="w").grid(row=0, column=1, padx=4)
        ctk.CTkLabel(row, text=tx.category_name or "—", width=120, anchor="w").grid(
            row=0, column=2, padx=4
        )
        ctk.CTkLabel(row, text=tx.description or "—", width=180, anchor="w").grid(
            row=0, column=3, padx=4
        )
        ctk.CTkLabel(
            row, text=format_currency(tx.amount, tx.currency), width=110, anchor="e",
            text_color="#F44336",
        ).grid(row=0, column=4, padx=4)
        ctk.CTkLabel(
            row, text=format_currency(tx.vnd_amount) if tx.currency != "VND" else "",
            width=110, anchor="e", text_color="gray60",
        ).grid(row=0, column=5, padx=4)

        progress = self._budget_svc.get_transaction_budget_progress(tx.date)
        ctk.CTkLabel(
            row, text=f"{progress}%" if progress else "", width=60, anchor="e",
            text_color="gray60",
        ).grid(row=0, column=6, padx=4)

        acts = ctk.CTkFrame(row, fg_color="transparent")
        acts.grid(row=0, column=7, padx=(4, 6))
        ctk.CTkButton(
            acts, text="Edit", width=44, height=24,
            command=lambda t=tx: self._open_edit_form(t),
        ).pack(side="left", padx=2)
        ctk.CTkButton(
            acts, text="Del", width=38, height=24,
            fg_color="#F44336", hover_color="#D32F2F",
            command=lambda t=tx: self._delete_tx(t),
        ).pack(side="left")

    # ── Actions ──────────────────────────────────────────────────────────────
    def _open_form(self, transaction: Transaction | None = None):
        selected = next((c for c in self._cards if c.name == self._card_var.get()), None)
        form = TransactionForm(
            self.winfo_toplevel(),
            self._tx_svc, self._card_svc, self._cat_svc,
            transaction=transaction,
            default_card_id=selected.id if selected else None,
            default_currency=self._get_default_currency(),
            date_format=self._date_format,
        )
        self.wait_window(form)
        if form.saved:
            self._notify_refresh("transaction")

    def _open_add_form(self):
        if not self._card_svc.get_all():
            ConfirmDialog(
                self.winfo_toplevel(), "No Cards",
                "Add a card on the Cards tab before recording transactions.",
                confirm_text="OK", destructive=False,
            )
            return
        self._open_form()

    def _open_edit_form(self, tx: Transaction):
        self._open_form(tx)

    def _delete_tx(self, tx: Transaction):
        dlg = ConfirmDialog(
            self.winfo_toplevel(),
            "Delete Transaction",
            f"Delete this transaction of {format_currency(tx.amount, tx.currency)}?",
        )
        if dlg.result:
            self._tx_svc.delete(tx.id)
            self._notify_refresh("transaction")
