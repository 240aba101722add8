import customtkinter as ctk
from tkinter import filedialog

from database.db_manager import DatabaseManager
from services.currency_service import CurrencyConversionError, CurrencyService
from utils.app_config import get_db_folder, set_db_folder
from utils.constants import DB_FILE, REFERENCE_CURRENCY, SUPPORTED_CURRENCIES
from utils.date_helpers import DATE_FORMAT_OPTIONS


class SettingsTab(ctk.CTkFrame):
    """Settings tab: DB folder, app preferences, exchange rates."""

    def __init__(
        self,
        master,
        db: DatabaseManager,
        currency_service: CurrencyService,
        **kwargs,
    ):
        super().__init__(master, fg_color="transparent", **kwargs)
        self._db = db
        self._currency_svc = currency_service

        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)

        scroll = ctk.CTkScrollableFrame(self, fg_color="transparent")
        scroll.grid(row=0, column=0, sticky="nsew")
        scroll.grid_columnconfigure(0, weight=1)

        self._build_db_folder_section(scroll)
        self._build_app_settings_section(scroll)
        self._build_rates_section(scroll)

    def refresh(self):
        """Re-read settings from DB and update displayed values."""
        appearance = self._db.get_setting("appearance_mode", "system")
        self._appearance_var.set(appearance.title())
        self._currency_var.set(self._db.get_setting("default_currency", REFERENCE_CURRENCY))
        date_fmt = self._db.get_setting("date_format", "DD/MM/YYYY")
        if date_fmt in DATE_FORMAT_OPTIONS:
            self._date_fmt_var.set(date_fmt)

    # ── Section 1: DB folder ──────────────────────────────────────────────────

    def _build_db_folder_section(self, parent):
        section = self._make_section(parent, "Database Folder", row=0)

        ctk.CTkLabel(
            section,
            text=f"The database file ({DB_FILE}) is stored in this folder.",
            text_color="gray60", font=ctk.CTkFont(size=11), anchor="w",
        ).grid(row=0, column=0, columnspan=3, sticky="w", padx=8, pady=(4, 6))

        self._db_folder_var = ctk.StringVar(value=get_db_folder() or "(default: app folder)")
        ctk.CTkEntry(
            section, textvariable=self._db_folder_var, state="readonly", width=340,
        ).grid(row=1, column=0, padx=(8, 4), pady=4, sticky="ew")

        ctk.CTkButton(
            section, text="Browse…", width=90, command=self._browse_db_folder,
        ).grid(row=1, column=1, padx=4)
        ctk.CTkButton(
            section, text="Reset to Default", width=120,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=lambda: self._change_db_folder(None),
        ).grid(row=1, column=2, padx=(4, 8))

        self._db_status = ctk.CTkLabel(
            section, text="", font=ctk.CTkFont(size=11), anchor="w",
        )
        self._db_status.grid(row=2, column=0, columnspan=3, sticky="w", padx=8, pady=(0, 6))

    def _browse_db_folder(self):
        path = filedialog.askdirectory(title="Choose DB folder")
        if path:
            self._change_db_folder(path)

    def _change_db_folder(self, path: str | None):
        try:
            set_db_folder(path)
        except OSError as e:
            self._db_status.configure(text=f"Could not save setting: {e}", text_color="#F44336")
            return
        self._db_folder_var.set(path or "(default: app folder)")
        self._db_status.configure(
            text="Restart the app for the change to take effect.", text_color="#FF9800",
        )

    # ── Section 2: App settings ───────────────────────────────────────────────

    def _build_app_settings_section(self, parent):
        section = self._make_section(parent, "App Settings", row=1)

        self._appearance_var = ctk.StringVar(
            value=self._db.get_setting("appearance_mode", "system").title()
        )
        self._currency_var = ctk.StringVar(
            value=self._db.get_setting("default_currency", REFERENCE_CURRENCY)
        )
        self._date_fmt_var = ctk.StringVar(
            value=self._db.get_setting("date_format", "DD/MM/YYYY")
        )

        for r, (label, values, var) in enumerate([
            ("Appearance:", ["System", "Light", "Dark"], self._appearance_var),
            ("Default Currency:", list(SUPPORTED_CURRENCIES), self._currency_var),
            ("Date Format:", DATE_FORMAT_OPTIONS, self._date_fmt_var),
        ]):
            ctk.CTkLabel(section, text=label, anchor="e", width=120).grid(
                row=r, column=0, padx=(8, 4), pady=6, sticky="e"
            )
            ctk.CTkComboBox(
                section, values=values, variable=var, width=180, state="readonly",
            ).grid(row=r, column=1, padx=4, pady=6, sticky="w")

        ctk.CTkLabel(
            section,
            text="Date format changes take effect on next app restart.",
            text_color="gray60", font=ctk.CTkFont(size=11), anchor="w",
        ).grid(row=3, column=0, columnspan=2, sticky="w", padx=8)

        ctk.CTkButton(
            section, text="Save Settings", width=140, command=self._save_settings,
        ).grid(row=4, column=0, columnspan=2, pady=(10, 8))

        self._settings_status_var = ctk.StringVar()
        ctk.CTkLabel(
            section, textvariable=self._settings_status_var,
            text_color="#4CAF50", font=ctk.CTkFont(size=11),
        ).grid(row=5, column=0, columnspan=2, pady=(0, 8))

    def _save_settings(self):
        appearance_key = self._appearance_var.get().lower()
        self._db.set_setting("appearance_mode", appearance_key)
        self._db.set_setting("default_currency", self._currency_var.get())
        self._db.set_setting("date_format", self._date_fmt_var.get())
        ctk.set_appearance_mode(appearance_key)
        self._settings_status_var.set("Settings saved.")

    # ── Section 3: Exchange rates ─────────────────────────────────────────────

    def _build_rates_section(self, parent):
        section = self._make_section(parent, "Exchange Rates", row=2)

        self._rates_var = ctk.StringVar()
        ctk.CTkLabel(
            section, textvariable=self._rates_var, anchor="w", justify="left",
        ).grid(row=0, column=0, sticky="w", padx=8, pady=4)
        ctk.CTkButton(
            section, text="Refresh Rates", width=120, command=self._refresh_rates,
        ).grid(row=1, column=0, sticky="w", padx=8, pady=(4, 8))

    def _refresh_rates(self):
        self._currency_svc.clear_cache()
        lines = []
        for currency in SUPPORTED_CURRENCIES:
            if currency == REFERENCE_CURRENCY:
                continue
            try:
                rate = self._currency_svc.get_rate(currency)
                lines.append(f"1 {currency} = {rate:,.0f} {REFERENCE_CURRENCY}")
            except CurrencyConversionError as e:
                lines.append(f"{currency}: {e}")
        self._rates_var.set("\n".join(lines))

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _make_section(self, parent, title: str, row: int) -> ctk.CTkFrame:
        """Create a labelled card section and return its inner frame."""
        outer = ctk.CTkFrame(parent, corner_radius=8)
        outer.grid(row=row, column=0, sticky="ew", padx=12, pady=8)
        outer.grid_columnconfigure(0, weight=1)

        ctk.CTkLabel(
            outer, text=title, font=ctk.CTkFont(size=14, weight="bold"), anchor="w",
        ).grid(row=0, column=0, sticky="w", padx=12, pady=(10, 4))

        inner = ctk.CTkFrame(outer, fg_color="transparent")
        inner.grid(row=1, column=0, sticky="ew", padx=4, pady=(0, 8))
        inner.grid_columnconfigure(0, weight=1)
        return inner
