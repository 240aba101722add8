import customtkinter as ctk
from services.card_service import CardService
from services.currency_service import CurrencyConversionError
from services.net_worth_service import NetWorthService
from models.net_worth import Asset, Liability
from utils.constants import ASSET_TYPES, LIABILITY_TYPES, SUPPORTED_CURRENCIES


class _HoldingForm(ctk.CTkToplevel):
    """Shared layout for asset and liability dialogs. Sets self.saved on success."""

    TYPES: tuple = ()
    NOUN = ""

    def __init__(self, master, net_worth_service: NetWorthService, item=None, **kwargs):
        super().__init__(master, **kwargs)
        self._svc = net_worth_service
        self._item = item
        self.saved = False

        self.title(f"{'Edit' if item else 'New'} {self.NOUN}")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)
        self._row = 0

        self._name_var = self._entry("Name:", item.name if item else "")
        self._type_var = ctk.StringVar(value=item.type if item else self.TYPES[0])
        self._add_row("Type:", ctk.CTkComboBox(
            self, values=list(self.TYPES), variable=self._type_var,
            width=220, state="readonly",
        ))
        self._custom_var = self._entry("Custom type:", (item.custom_type or "") if item else "")

        amount_row = ctk.CTkFrame(self, fg_color="transparent")
        self._amount_var = ctk.StringVar(value=f"{item.amount:g}" if item else "")
        ctk.CTkEntry(amount_row, textvariable=self._amount_var, width=140).pack(side="left")
        self._currency_var = ctk.StringVar(value=item.original_currency if item else "VND")
        ctk.CTkComboBox(
            amount_row, values=list(SUPPORTED_CURRENCIES),
            variable=self._currency_var, width=76, state="readonly",
        ).pack(side="left", padx=(4, 0))
        self._add_row("Amount:", amount_row)

        self._bank_var = self._entry("Bank:", (item.bank or "") if item else "")
        rate = item.interest_rate if item and item.interest_rate is not None else ""
        self._rate_var = self._entry("Interest (%/yr):", f"{rate}")

        self._build_extra_fields(item)

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=300, anchor="w",
        ).grid(row=self._row, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")
        self._row += 1

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=self._row, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        if item:
            ctk.CTkButton(
                btn_frame, text="Delete", width=80,
                fg_color="#F44336", hover_color="#D32F2F",
                command=self._on_delete,
            ).pack(side="left", padx=8)
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        self._center()

    # ── Layout helpers ───────────────────────────────────────────────────────

    def _add_row(self, label: str, widget):
        top = 16 if self._row == 0 else 4
        ctk.CTkLabel(self, text=label).grid(
            row=self._row, column=0, padx=(16, 8), pady=(top, 4), sticky="e"
        )
        widget.grid(row=self._row, column=1, padx=(0, 16), pady=(top, 4), sticky="ew")
        self._row += 1

    def _entry(self, label: str, value: str) -> ctk.StringVar:
        var = ctk.StringVar(value=value)
        self._add_row(label, ctk.CTkEntry(self, textvariable=var, width=220))
        return var

    @staticmethod
    def _optional_number(raw: str, cast=float):
        raw = raw.strip()
        return cast(raw) if raw else None

    # ── Subclass hooks ───────────────────────────────────────────────────────

    def _build_extra_fields(self, item):
        pass

    def _extra_values(self) -> dict:
        return {}

    def _save(self, values: dict):
        raise NotImplementedError

    def _delete(self):
        raise NotImplementedError

    # ── Actions ──────────────────────────────────────────────────────────────

    def _on_save(self):
        try:
            amount = float(self._amount_var.get().replace(",", ""))
            extra = {
                "custom_type": self._custom_var.get(),
                "bank": self._bank_var.get().strip(),
                "interest_rate": self._optional_number(self._rate_var.get()),
            }
            extra.update(self._extra_values())
        except ValueError:
            self._error_var.set("Amounts and rates must be numbers.")
            return
        values = dict(
            name=self._name_var.get(),
            type_=self._type_var.get(),
            amount=amount,
            currency=self._currency_var.get(),
            **extra,
        )
        try:
            self._save(values)
        except (ValueError, CurrencyConversionError) as e:
            self._error_var.set(str(e))
            return
        self.saved = True
        self.destroy()

    def _on_delete(self):
        self._delete()
        self.saved = True
        self.destroy()

    def _center(self):
        self.update_idletasks()
        mw = self.master.winfo_x() + self.master.winfo_width() // 2
        mh = self.master.winfo_y() + self.master.winfo_height() // 2
        w, h = self.winfo_reqwidth(), self.winfo_reqheight()
        self.geometry(f"+{mw - w//2}+{mh - h//2}")


class AssetForm(_HoldingForm):
    TYPES = ASSET_TYPES
    NOUN = "Asset"

    def __init__(self, master, net_worth_service: NetWorthService, asset: Asset | None = None, **kwargs):
        super().__init__(master, net_worth_service, item=asset, **kwargs)

    def _build_extra_fields(self, item):
        term = item.term_months if item and item.term_months is not None else ""
        self._term_var = self._entry("Term (months):", f"{term}")
        self._symbol_var = self._entry("Symbol:", (item.symbol or "") if item else "")

    def _extra_values(self) -> dict:
        return {
            "term_months": self._optional_number(self._term_var.get(), int),
            "symbol": self._symbol_var.get().strip(),
        }

    def _save(self, values: dict):
        if self._item:
            self._svc.update_asset(self._item.id, **values)
        else:
            self._svc.create_asset(**values)

    def _delete(self):
        self._svc.delete_asset(self._item.id)


class LiabilityForm(_HoldingForm):
    TYPES = LIABILITY_TYPES
    NOUN = "Liability"

    def __init__(
        self,
        master,
        net_worth_service: NetWorthService,
        card_service: CardService,
        liability: Liability | None = None,
        **kwargs,
    ):
        self._cards = card_service.get_all()
        super().__init__(master, net_worth_service, item=liability, **kwargs)

    def _build_extra_fields(self, item):
        self._include_var = ctk.BooleanVar(value=item.include_credit_card if item else False)
        self._add_row("Add card balance:", ctk.CTkCheckBox(self, text="", variable=self._include_var))

        names = [c.name for c in self._cards]
        current = next(
            (c.name for c in self._cards if item and c.id == item.credit_card_id),
            names[0] if names else "",
        )
        self._card_var = ctk.StringVar(value=current)
        self._add_row("Card:", ctk.CTkComboBox(
            self, values=names, variable=self._card_var, width=220, state="readonly",
        ))

    def _extra_values(self) -> dict:
        card = next((c for c in self._cards if c.name == self._card_var.get()), None)
        return {
            "include_credit_card": self._include_var.get(),
            "credit_card_id": card.id if card else None,
        }

    def _save(self, values: dict):
        if self._item:
            self._svc.update_liability(self._item.id, **values)
        else:
            self._svc.create_liability(**values)

    def _delete(self):
        self._svc.delete_liability(self._item.id)
