import customtkinter as ctk
from tkinter import colorchooser
from services.category_service import CategoryService, is_hex_color
from models.category import Category
from utils.constants import CATEGORY_COLORS


class CategoryForm(ctk.CTkToplevel):
    """Add or edit a spending category."""

    def __init__(
        self,
        master,
        category_service: CategoryService,
        category: Category | None = None,
        **kwargs,
    ):
        super().__init__(master, **kwargs)
        self._svc = category_service
        self._category = category
        self.saved = False

        self.title("Edit Category" if category else "New Category")
        self.resizable(False, False)
        self.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(self, text="Name:").grid(
            row=0, column=0, padx=(16, 8), pady=(16, 4), sticky="e"
        )
        self._name_var = ctk.StringVar(value=category.name if category else "")
        ctk.CTkEntry(self, textvariable=self._name_var, width=220).grid(
            row=0, column=1, padx=(0, 16), pady=(16, 4), sticky="ew"
        )

        ctk.CTkLabel(self, text="Color:").grid(
            row=1, column=0, padx=(16, 8), pady=4, sticky="e"
        )
        color_row = ctk.CTkFrame(self, fg_color="transparent")
        color_row.grid(row=1, column=1, padx=(0, 16), pady=4, sticky="ew")

        initial = category.color_hex if category else self._next_palette_color()
        self._color_var = ctk.StringVar(value=initial)
        entry = ctk.CTkEntry(color_row, textvariable=self._color_var, width=100)
        entry.pack(side="left")
        entry.bind("<FocusOut>", self._sync_swatch)

        self._swatch = ctk.CTkLabel(
            color_row, text="", width=32, height=24, corner_radius=4, fg_color=initial,
        )
        self._swatch.pack(side="left", padx=(8, 0))

        ctk.CTkButton(
            color_row, text="Pick", width=60,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self._pick_color,
        ).pack(side="left", padx=(8, 0))

        palette = ctk.CTkFrame(self, fg_color="transparent")
        palette.grid(row=2, column=1, padx=(0, 16), pady=(0, 6), sticky="w")
        for color in CATEGORY_COLORS:
            ctk.CTkButton(
                palette, text="", width=20, height=20, corner_radius=10,
                fg_color=color, hover_color=color, border_width=1, border_color="gray50",
                command=lambda c=color: self._use_color(c),
            ).pack(side="left", padx=2)

        self._error_var = ctk.StringVar()
        ctk.CTkLabel(
            self, textvariable=self._error_var,
            text_color="#F44336", wraplength=300, anchor="w",
        ).grid(row=3, column=0, columnspan=2, padx=16, pady=(0, 4), sticky="ew")

        btn_frame = ctk.CTkFrame(self, fg_color="transparent")
        btn_frame.grid(row=4, column=0, columnspan=2, padx=16, pady=(4, 16), sticky="ew")
        ctk.CTkButton(
            btn_frame, text="Cancel", width=90,
            fg_color="transparent", border_width=1,
            text_color=("gray10", "gray90"),
            command=self.destroy,
        ).pack(side="left")
        ctk.CTkButton(btn_frame, text="Save", width=90, command=self._on_save).pack(side="right")

        self.transient(master)
        self.grab_set()
        self._center()

    def _next_palette_color(self) -> str:
        used = {c.color_hex.lower() for c in self._svc.get_all()}
        return next((c for c in CATEGORY_COLORS if c.lower() not in used), CATEGORY_COLORS[0])

    def _pick_color(self):
        result = colorchooser.askcolor(
            color=self._color_var.get(), parent=self, title="Pick Category Color"
        )
        if result and result[1]:
            self._use_color(result[1])

    def _use_color(self, color: str):
        self._color_var.set(color)
        self._swatch.configure(fg_color=color)

    def _sync_swatch(self, _event=None):
        color = self._color_var.get().strip()
        if is_hex_color(color):
            self._swatch.configure(fg_color=color)

    def _on_save(self):
        color = self._color_var.get().strip()
        if not color.startswith("#"):
            color = "#" + color
        try:
            if self._category:
                self._svc.update(self._category.id, self._name_var.get(), color)
            else:
                self._svc.create(self._name_var.get(), color)
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
