#!/usr/bin/env python3
"""
Scientific Calculator (Tkinter front end)

- Keypad, display, history list, settings menu; all logic lives in Calculator
- Light/Dark palettes are plain values handed to the window
- History: double-click to reuse an expression, export CSV, copy as text
"""

from __future__ import annotations

import logging
import os
import tkinter as tk
from dataclasses import dataclass
from tkinter import filedialog, messagebox
from tkinter import font as tkfont
from typing import Callable, Dict, List, Optional, Tuple

from .calculator import Calculator
from .engine import PRECISION_CHOICES, AngleMode
from .export import history_to_text, write_history_csv

logger = logging.getLogger(__name__)

# ============================ Small UI helpers ==============================

def _hex_to_rgb(h: str) -> Tuple[int, int, int]:
    h = h.lstrip("#"); return (int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))
def _rgb_to_hex(r: int, g: int, b: int) -> str: return f"#{r:02x}{g:02x}{b:02x}"
def _mix(c1: str, c2: str, t: float) -> str:
    """Blend two '#rrggbb' colors; t=0 gives c1, t=1 gives c2."""
    a, b = _hex_to_rgb(c1), _hex_to_rgb(c2)
    return _rgb_to_hex(*(round(x + (y - x) * t) for x, y in zip(a, b)))

@dataclass(frozen=True)
class Palette:
    name: str; bg: str; card: str; fg: str; subtle: str; border: str
    primary: str; accent: str; success: str; error: str

LIGHT = Palette("light", "#F9FAFB", "#FFFFFF", "#111827", "#6B7280", "#E5E7EB",
                "#3B82F6", "#1D4ED8", "#10B981", "#EF4444")
DARK  = Palette("dark",  "#1F2937", "#374151", "#F9FAFB", "#D1D5DB", "#4B5563",
                "#3B82F6", "#1D4ED8", "#10B981", "#EF4444")

# (label, kind, token); kind picks the color, token None means a command key
KEYPAD: List[List[Tuple[str, str, Optional[str]]]] = [
    [("C", "function", None), ("⌫", "function", None), ("(", "operator", "("), (")", "operator", ")")],
    [("sin", "scientific", "sin("), ("cos", "scientific", "cos("), ("tan", "scientific", "tan("), ("÷", "operator", "÷")],
    [("log", "scientific", "log("), ("ln", "scientific", "ln("), ("√", "scientific", "sqrt("), ("×", "operator", "×")],
    [("π", "constant", "π"), ("e", "constant", "e"), ("^", "operator", "^"), ("-", "operator", "-")],
    [("7", "number", "7"), ("8", "number", "8"), ("9", "number", "9"), ("+", "operator", "+")],
    [("4", "number", "4"), ("5", "number", "5"), ("6", "number", "6"), ("=", "equals", None)],
    [("1", "number", "1"), ("2", "number", "2"), ("3", "number", "3")],
    [("0", "number", "0"), (".", "number", ".")],
]

_KEY_TOKENS = {"*": "×", "/": "÷"}
_KEY_CHARS = set("0123456789.+-()^")

def key_to_token(ch: str) -> Optional[str]:
    """Map a typed character to the keypad token it stands for."""
    if ch in _KEY_TOKENS: return _KEY_TOKENS[ch]
    return ch if ch in _KEY_CHARS else None

def button_colors(p: Palette, kind: str) -> Tuple[str, str]:
    bg = {"number": p.bg, "operator": p.primary, "scientific": p.accent,
          "function": p.error, "equals": p.success}.get(kind, p.card)
    fg = p.fg if kind in ("number", "constant") else "#FFFFFF"
    return bg, fg

# =============================== Window =====================================

class CalculatorApp(tk.Tk):
    def __init__(self, calculator: Optional[Calculator] = None, palette: Palette = LIGHT) -> None:
        super().__init__()
        self.title("Scientific Calculator"); self.minsize(640, 520)
        self.calc = calculator or Calculator()
        self.palette = palette
        self._history_ids: List[str] = []
        self._buttons: List[Tuple[tk.Button, str]] = []

        self._init_fonts(); self._build_ui(); self._build_menu(); self._apply_palette(); self._refresh()
        self.bind("<Return>", lambda e: self.on_equals())
        self.bind("<KP_Enter>", lambda e: self.on_equals())
        self.bind("<Escape>", lambda e: self.on_clear())
        self.bind("<BackSpace>", lambda e: self.on_delete())
        self.bind("<Key>", self._on_key)

    def _init_fonts(self) -> None:
        def choose(*names: str) -> str:
            avail = set(tkfont.families())
            for n in names:
                if n in avail: return n
            return "TkDefaultFont"
        self.fonts: Dict[str, tkfont.Font] = {
            "display": tkfont.Font(family=choose("Consolas", "Courier New"), size=26),
            "ui": tkfont.Font(family=choose("Segoe UI", "Arial"), size=12),
            "ui_bold": tkfont.Font(family=choose("Segoe UI Semibold", "Segoe UI", "Arial"), size=12, weight="bold"),
            "small": tkfont.Font(family=choose("Segoe UI", "Arial"), size=9),
        }

    def _build_ui(self) -> None:
        self.root_frame = tk.Frame(self, bd=0); self.root_frame.pack(fill="both", expand=True, padx=12, pady=12)
        self.left_box = tk.Frame(self.root_frame); self.left_box.pack(side="left", fill="both", expand=True)
        self.right_box = tk.Frame(self.root_frame, width=240); self.right_box.pack(side="right", fill="y", padx=(10, 0))

        self.display_var = tk.StringVar()
        self.display = tk.Label(self.left_box, textvariable=self.display_var, anchor="e",
                                font=self.fonts["display"], padx=12, pady=16, wraplength=380, justify="right")
        self.display.pack(fill="x")
        self.status = tk.Label(self.left_box, anchor="w", font=self.fonts["small"])
        self.status.pack(fill="x", pady=(4, 8))

        self.grid_frame = tk.Frame(self.left_box); self.grid_frame.pack(fill="both", expand=True)
        for c in range(4): self.grid_frame.grid_columnconfigure(c, weight=1)
        for r in range(len(KEYPAD)): self.grid_frame.grid_rowconfigure(r, weight=1)

        commands: Dict[str, Callable[[], None]] = {"C": self.on_clear, "⌫": self.on_delete, "=": self.on_equals}
        for row, keys in enumerate(KEYPAD):
            for col, (label, kind, token) in enumerate(keys):
                action = commands[label] if token is None else (lambda t=token: self.on_token(t))
                b = tk.Button(self.grid_frame, text=label, relief="flat", bd=0, command=action,
                              font=self.fonts["ui_bold"] if kind != "number" else self.fonts["ui"])
                # '=' spans the last two rows of the operator column, '0' the first two digit columns
                if label == "=": b.grid(row=row, column=col, rowspan=2, sticky="nsew", padx=3, pady=3)
                elif label == "0": b.grid(row=row, column=0, columnspan=2, sticky="nsew", padx=3, pady=3, ipady=6)
                elif label == ".": b.grid(row=row, column=2, sticky="nsew", padx=3, pady=3, ipady=6)
                else: b.grid(row=row, column=col, sticky="nsew", padx=3, pady=3, ipady=6)
                self._buttons.append((b, kind))

        self.hist_header = tk.Label(self.right_box, text="Calculation History", font=self.fonts["ui_bold"])
        self.hist_header.pack(anchor="w", pady=(0, 4))
        self.hist_container = tk.Frame(self.right_box, bd=1); self.hist_container.pack(fill="both", expand=True)
        self.history_list = tk.Listbox(self.hist_container, height=18, width=30, activestyle="none",
                                       selectmode="browse", bd=0, highlightthickness=0, font=self.fonts["ui"])
        self.history_list.pack(side="left", fill="both", expand=True)
        self.hist_scroll = tk.Scrollbar(self.hist_container, orient="vertical", command=self.history_list.yview)
        self.hist_scroll.pack(side="right", fill="y")
        self.history_list.config(yscrollcommand=self.hist_scroll.set)
        self.history_list.bind("<Double-1>", self._history_recall)

    def _build_menu(self) -> None:
        menubar = tk.Menu(self); settings_menu = tk.Menu(menubar, tearoff=0)
        self.mode_var = tk.StringVar(value=self.calc.angle_mode.value)
        mode_menu = tk.Menu(settings_menu, tearoff=0)
        mode_menu.add_radiobutton(label="Radians", value=AngleMode.RADIANS.value, variable=self.mode_var,
                                  command=lambda: self.set_mode(AngleMode.RADIANS))
        mode_menu.add_radiobutton(label="Degrees", value=AngleMode.DEGREES.value, variable=self.mode_var,
                                  command=lambda: self.set_mode(AngleMode.DEGREES))
        settings_menu.add_cascade(label="Angle Mode", menu=mode_menu)

        self.prec_var = tk.IntVar(value=self.calc.precision)
        prec_menu = tk.Menu(settings_menu, tearoff=0)
        for n in PRECISION_CHOICES:
            prec_menu.add_radiobutton(label=f"{n} decimal places", value=n, variable=self.prec_var,
                                      command=lambda n=n: self.set_precision(n))
        settings_menu.add_cascade(label="Decimal Precision", menu=prec_menu)
        settings_menu.add_separator()
        settings_menu.add_command(label="Toggle Dark Mode", command=self.toggle_theme)
        menubar.add_cascade(label="Settings", menu=settings_menu)

        hist_menu = tk.Menu(menubar, tearoff=0)
        hist_menu.add_command(label="Download CSV…", command=self.export_history)
        hist_menu.add_command(label="Copy as Text", command=self.copy_history)
        hist_menu.add_separator()
        hist_menu.add_command(label="Clear History", command=self.clear_history)
        menubar.add_cascade(label="History", menu=hist_menu)
        self.config(menu=menubar)

    # Theming
    def _apply_palette(self) -> None:
        p = self.palette
        self.configure(bg=p.bg)
        for w in (self.root_frame, self.left_box, self.right_box, self.grid_frame):
            w.configure(bg=p.bg)
        self.display.configure(bg=p.card, fg=p.fg)
        self.status.configure(bg=p.bg, fg=p.subtle)
        self.hist_header.configure(bg=p.bg, fg=p.fg)
        self.hist_container.configure(bg=p.card, highlightbackground=p.border, highlightthickness=1)
        self.history_list.configure(bg=p.card, fg=p.fg, selectbackground=p.border, selectforeground=p.fg)
        for b, kind in self._buttons:
            bg, fg = button_colors(p, kind)
            hov = _mix(bg, "#ffffff", 0.12)
            b.configure(bg=bg, fg=fg, activebackground=hov, activeforeground=fg)
            b.bind("<Enter>", lambda _e, b=b, hov=hov: b.configure(bg=hov))
            b.bind("<Leave>", lambda _e, b=b, bg=bg: b.configure(bg=bg))

    def toggle_theme(self) -> None:
        self.palette = DARK if self.palette is LIGHT else LIGHT
        self._apply_palette()

    # Actions
    def on_token(self, token: str) -> None: self.calc.append_token(token); self._refresh()
    def on_delete(self) -> None: self.calc.delete_last(); self._refresh()
    def on_clear(self) -> None: self.calc.clear(); self._refresh()

    def on_equals(self) -> None:
        outcome = self.calc.evaluate_current()
        if outcome is not None and not outcome.ok: self.bell()
        self._refresh()

    def set_mode(self, mode: AngleMode) -> None: self.calc.set_angle_mode(mode); self._refresh()
    def set_precision(self, n: int) -> None: self.calc.set_precision(n); self._refresh()

    def clear_history(self) -> None:
        if not self.calc.history: return
        if messagebox.askyesno("Clear History", "Are you sure you want to clear all history?", parent=self):
            self.calc.clear_history(); self._refresh()

    def export_history(self) -> None:
        if not self.calc.history:
            messagebox.showinfo("No History", "There are no calculations to download", parent=self); return
        directory = filedialog.askdirectory(parent=self, title="Save history to…")
        if not directory: return
        try:
            path = write_history_csv(self.calc.history, directory)
        except OSError as exc:
            logger.warning("history export failed: %s", exc)
            messagebox.showerror("Error", f"Failed to download history: {exc}", parent=self); return
        messagebox.showinfo("History", f"History downloaded successfully!\n{path}", parent=self)

    def copy_history(self) -> None:
        if not self.calc.history:
            messagebox.showinfo("No History", "There are no calculations to download", parent=self); return
        self.clipboard_clear(); self.clipboard_append(history_to_text(self.calc.history))

    def _history_recall(self, _e=None) -> None:
        sel = self.history_list.curselection()
        if not sel: return
        self.calc.recall(self._history_ids[sel[0]]); self._refresh()

    def _on_key(self, event: tk.Event):
        token = key_to_token(event.char or "")
        if token is None: return
        self.on_token(token)
        return "break"

    # Helpers
    def _status_text(self) -> str:
        mode = "RAD" if self.calc.angle_mode is AngleMode.RADIANS else "DEG"
        return f"Angle: {mode} • Precision: {self.calc.precision} decimals • History: {len(self.calc.history)}"

    def _refresh(self) -> None:
        self.display_var.set(self.calc.display)
        self.status.config(text=self._status_text())
        self.mode_var.set(self.calc.angle_mode.value); self.prec_var.set(self.calc.precision)
        records = self.calc.history
        self._history_ids = [r.id for r in records]
        self.history_list.delete(0, "end")
        for r in records: self.history_list.insert("end", f"{r.expression} = {r.result}")

# ============================= Entrypoint ===================================

def main() -> int:
    logging.basicConfig(level=os.environ.get("SCICALC_LOG_LEVEL", "WARNING").upper(),
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        app = CalculatorApp(); app.mainloop(); return 0
    except tk.TclError as exc:
        logger.error("cannot start the calculator window: %s", exc)
        return 1

if __name__ == "__main__":
    raise SystemExit(main())
