import customtkinter as ctk
from services.transaction_service import TransactionService
from services.card_service import CardService
from services.category_service import CategoryService
from services.currency_service import CurrencyConversionError
from models.transaction import Transaction
from ui.components.date_picker import DatePickerWidget
from utils.constants import SUPPORTED_CURRENCIES
from utils.date_helpers import today_str

_NO_CATEGORY = "(none)"


class TransactionForm(ctk.CTkToplevel):
    """Add or edit a card transaction."""

    _last_date: str = today_str()  # reset to today on each app launch

    def __init__(
        self,
        master,
        tx_service: TransactionService,
        card_service: CardService,
        category_service: CategoryService,
        transaction: Transaction | None = None,
        default_card_id: int | None = None,
        default_currency: str = "VND",
        date_format: str = "DD/MM/YYYY",
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._tx_svc = tx_service
        self._transaction = transaction
        self.saved = False

        self.title("Edit Transaction" if transaction else "Add Transaction")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        self._cards = card_service.get_all()
        self._cats = category_service.get_all()
        card_names = [c.name for c in self._cards]
        cat_names = [_NO_CATEGORY] + [c.name for c in self._cats]

        r = 0
        # Description
        self._label("Description:", r)
        self._desc_var = ctk.StringVar(value=transaction.description if transaction else "")
        ctk.CTkEntry(self, textvariable=self._desc_var, width=220).grid(
            row=r, column=1, padx=(0, 16), pady=(16 if r == 0 else 4, 4), sticky="ew"
        )
        r += 1

        # Amount + currency
        self._label("Amount:", r)
        amount_row = ctk.CTkFrame(self, fg_color="transparent")
        amount_row.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        self._amount_var = ctk.StringVar(value=f"{transaction.amount:g}" if transaction else "")
        ctk.CTkEntry(amount_row, textvariable=self._amount_var, width=140).pack(side="left")
        self._currency_var = ctk.StringVar(
            value=transaction.currency if transaction else default_currency
        )
        ctk.CTkComboBox(
            amount_row, values=list(SUPPORTED_CURRENCIES),
            variable=self._currency_var, width=76, state="readonly",
        ).pack(side="left", padx=(4, 0))
        r += 1

        # Date
        self._label("Date:", r)
        self._date_picker = DatePickerWidget(
            self,
            initial_date=transaction.date if transaction else TransactionForm._last_date,
            date_format=date_format,
        )
        self._date_picker.grid(row=r, column=1, padx=(0, 16), pady=4, sticky="w")
        r += 1

        # Card
        self._label("Card:", r)
        if transaction:
            current_card = transaction.card_name
        else:
            default = next((c for c in self._cards if c.id == default_card_id), None)
            current_card = default.name if default else (card_names[0] if card_names else "")
        self._card_var = ctk.StringVar(value=current_card)
        ctk.CTkComboBox(
            self, values=card_names, variable=self._card_var, width=220, state="readonly",
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
        r += 1

        # Category
        self._label("Category:", r)
        current_cat = (transaction.category_name if transaction else "") or _NO_CATEGORY
        self._cat_var = ctk.StringVar(value=current_cat)
        ctk.CTkComboBox(
            self, values=cat_names, variable=self._cat_var, width=220, state="readonly",
        ).grid(row=r, column=1, padx=(0, 16), pady=4, sticky="ew")
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
        ctk.CTkButton(btn_frame, text="Save", width=110, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        self._center()

    def _label(self, text, row):
        ctk.CTkLabel(self, text=text).grid(
            row=row, column=0, padx=(16, 8), pady=(16 if row == 0 else 4, 4), sticky="e"
        )

    def _on_save(self):
        try:
            amount = float(self._amount_var.get().replace(",", ""))
        except ValueError:
            self._error_var.set("Invalid amount.")
            return

        if not self._date_picker.is_valid():
            self._error_var.set("Invalid date.")
            return

        card = next((c for c in self._cards if c.name == self._card_var.get()), None)
        if not card:
            self._error_var.set("Please select a card.")
            return
        cat = next((c for c in self._cats if c.name == self._cat_var.get()), None)

        values = dict(
            card_id=card.id,
            category_id=cat.id if cat else None,
            amount=amount,
            currency=self._currency_var.get(),
            date=self._date_picker.get(),
            description=self._desc_var.get(),
        )
        try:
            if self._transaction:
                self._tx_svc.update(self._transaction.id, **values)
            else:
                self._tx_svc.create(**values)
        except (ValueError, CurrencyConversionError) as e:
            self._error_var.set(str(e))
            return
        TransactionForm._last_date = values["date"]
        self.saved = True
        self.destroy()

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")
