#!/usr/bin/env python
"""Minimal GUI for the ATM text compiler (Tkinter)."""

import os
import subprocess
import sys
import tkinter as tk
from tkinter import filedialog

from atm_txt.assembler import compile_file
from atm_txt.config import load_config
from atm_txt.errors import AtmError

THEMES = {
    "dark": {
        "bg": "#1e1e1e",
        "panel": "#252526",
        "fg": "#e6e6e6",
        "entry_bg": "#2d2d30",
        "button_bg": "#3a3a3a",
        "accent": "#7bd88f",
        "warning": "#e6b422",
        "error": "#e86a6a",
        "tooltip_bg": "#202225",
        "tooltip_fg": "#e6e6e6",
        "tooltip_border": "#3a3a3a",
    },
    "light": {
        "bg": "#f4f4f4",
        "panel": "#ffffff",
        "fg": "#1f1f1f",
        "entry_bg": "#ffffff",
        "button_bg": "#e6e6e6",
        "accent": "#2f8f5b",
        "warning": "#c28a1b",
        "error": "#b84b4b",
        "tooltip_bg": "#f0f0f0",
        "tooltip_fg": "#1f1f1f",
        "tooltip_border": "#c0c0c0",
    },
}

FORMAT_EXT = {"bin": ".bin", "asm": ".asm", "c": ".c"}


class Tooltip:
    def __init__(self, widget: tk.Widget, text: str, palette_getter=None) -> None:
        self.widget = widget
        self.text = text
        self.palette_getter = palette_getter
        self._tip = None
        self._after = None
        widget.bind("<Enter>", self._schedule)
        widget.bind("<Leave>", self._hide)
        widget.bind("<ButtonPress>", self._hide)

    def _schedule(self, _event=None) -> None:
        self._after = self.widget.after(500, self._show)

    def _show(self) -> None:
        if self._tip or not self.text:
            return
        x = self.widget.winfo_rootx() + 12
        y = self.widget.winfo_rooty() + self.widget.winfo_height() + 8
        bg, fg, border = self.palette_getter() if self.palette_getter else ("#202225", "#e6e6e6", "#3a3a3a")
        self._tip = tk.Toplevel(self.widget)
        self._tip.wm_overrideredirect(True)
        self._tip.wm_geometry(f"+{x}+{y}")
        tk.Label(
            self._tip,
            text=self.text,
            justify="left",
            background=bg,
            foreground=fg,
            relief="solid",
            borderwidth=1,
            padx=6,
            pady=4,
            wraplength=380,
            highlightbackground=border,
        ).pack()

    def _hide(self, _event=None) -> None:
        if self._after:
            self.widget.after_cancel(self._after)
            self._after = None
        if self._tip:
            self._tip.destroy()
            self._tip = None


def _default_output_path(input_path: str, fmt: str) -> str:
    if not input_path:
        return ""
    base, _ = os.path.splitext(input_path)
    return base + FORMAT_EXT.get(fmt, ".bin")


class App(tk.Tk):
    def __init__(self) -> None:
        super().__init__()
        self.title("atm-txt")
        self.geometry("760x480")

        self.input_var = tk.StringVar()
        self.output_var = tk.StringVar()
        self.config_var = tk.StringVar()
        self.format_var = tk.StringVar(value="bin")
        self.label_var = tk.StringVar(value="ATM_SONG")
        self.summary_var = tk.BooleanVar(value=True)
        self.dark_mode_var = tk.BooleanVar(value=True)
        self.status_var = tk.StringVar(value="Choose file")
        self._option_menus = []

        self._build_ui()

    def _build_ui(self) -> None:
        pad = {"padx": 8, "pady": 6}
        tt = self._tt

        row = 0
        lbl_input = tk.Label(self, text="Input song")
        lbl_input.grid(row=row, column=0, sticky="w", **pad)
        ent_input = tk.Entry(self, textvariable=self.input_var, width=60)
        ent_input.grid(row=row, column=1, **pad)
        btn_input = tk.Button(self, text="Browse", command=self._browse_input)
        btn_input.grid(row=row, column=2, **pad)
        tt(lbl_input, "ATM text song (.atm), at most 32 KiB.")
        tt(btn_input, "Pick a song file.")

        row += 1
        lbl_output = tk.Label(self, text="Output file")
        lbl_output.grid(row=row, column=0, sticky="w", **pad)
        ent_output = tk.Entry(self, textvariable=self.output_var, width=60)
        ent_output.grid(row=row, column=1, **pad)
        btn_output = tk.Button(self, text="Browse", command=self._browse_output)
        btn_output.grid(row=row, column=2, **pad)
        tt(ent_output, "Destination for the compiled song image.")

        row += 1
        lbl_config = tk.Label(self, text="Settings")
        lbl_config.grid(row=row, column=0, sticky="w", **pad)
        ent_config = tk.Entry(self, textvariable=self.config_var, width=60)
        ent_config.grid(row=row, column=1, **pad)
        btn_config = tk.Button(self, text="Browse", command=self._browse_config)
        btn_config.grid(row=row, column=2, **pad)
        tt(lbl_config, "Optional JSON settings file.")

        row += 1
        opts = tk.LabelFrame(self, text="Output")
        opts.grid(row=row, column=0, columnspan=3, sticky="ew", **pad)
        lbl_fmt = tk.Label(opts, text="Format")
        lbl_fmt.grid(row=0, column=0, sticky="w", padx=6, pady=4)
        fmt_menu = self._option_menu(opts, self.format_var, ["bin", "asm", "c"], command=self._sync_output_ext)
        fmt_menu.grid(row=0, column=1, sticky="w", padx=6, pady=4)
        tt(fmt_menu, "bin: raw image. asm: .db listing. c: const unsigned char array.")
        lbl_label = tk.Label(opts, text="Label")
        lbl_label.grid(row=0, column=2, sticky="w", padx=6, pady=4)
        ent_label = tk.Entry(opts, textvariable=self.label_var, width=16)
        ent_label.grid(row=0, column=3, sticky="w", padx=6, pady=4)
        tt(ent_label, "Symbol name used by asm/c output.")
        chk_summary = tk.Checkbutton(opts, text="Print summary", variable=self.summary_var)
        chk_summary.grid(row=0, column=4, sticky="w", padx=6, pady=4)
        chk_dark = tk.Checkbutton(opts, text="Dark mode", variable=self.dark_mode_var, command=self._apply_theme)
        chk_dark.grid(row=0, column=5, sticky="w", padx=6, pady=4)

        row += 1
        lbl_status = tk.Label(self, textvariable=self.status_var)
        lbl_status.grid(row=row, column=0, sticky="w", **pad)
        btn_check = tk.Button(self, text="Check", command=self._check)
        btn_check.grid(row=row, column=1, sticky="e", **pad)
        tt(btn_check, "Compile in memory and report the song layout.")
        btn_run = tk.Button(self, text="Compile", command=self._run)
        btn_run.grid(row=row, column=2, sticky="w", **pad)
        tt(btn_run, "Compile and write the output file.")

        row += 1
        self.console = tk.Text(self, height=10, width=80)
        self.console.grid(row=row, column=0, columnspan=3, sticky="nsew", **pad)

        self.grid_rowconfigure(row, weight=1)
        self.grid_columnconfigure(1, weight=1)
        self._apply_theme()

    def _browse_input(self) -> None:
        path = filedialog.askopenfilename(
            title="Select ATM song",
            filetypes=[("ATM songs", "*.atm *.txt"), ("All files", "*.*")],
        )
        if path:
            self.input_var.set(path)
            if not self.output_var.get():
                self.output_var.set(_default_output_path(path, self.format_var.get()))

    def _browse_output(self) -> None:
        fmt = self.format_var.get()
        path = filedialog.asksaveasfilename(
            title="Select output file",
            defaultextension=FORMAT_EXT.get(fmt, ".bin"),
            filetypes=[("Song image", "*.bin"), ("ASM files", "*.asm"), ("C files", "*.c"), ("All files", "*.*")],
        )
        if path:
            self.output_var.set(path)

    def _browse_config(self) -> None:
        path = filedialog.askopenfilename(
            title="Select settings",
            filetypes=[("JSON files", "*.json"), ("All files", "*.*")],
        )
        if path:
            self.config_var.set(path)

    def _sync_output_ext(self, _value: str = "") -> None:
        path = self.output_var.get().strip()
        if not path:
            return
        base, _ = os.path.splitext(path)
        self.output_var.set(base + FORMAT_EXT.get(self.format_var.get(), ".bin"))

    def _option_menu(self, parent, variable, values, command=None):
        menu = tk.OptionMenu(parent, variable, *values, command=command)
        self._option_menus.append(menu)
        return menu

    def _get_theme(self) -> dict:
        return THEMES["dark"] if self.dark_mode_var.get() else THEMES["light"]

    def _tooltip_palette(self):
        t = self._get_theme()
        return t["tooltip_bg"], t["tooltip_fg"], t["tooltip_border"]

    def _tt(self, widget, text: str) -> None:
        Tooltip(widget, text, palette_getter=self._tooltip_palette)

    def _iter_widgets(self, root):
        stack = [root]
        while stack:
            w = stack.pop()
            yield w
            stack.extend(w.winfo_children())

    def _apply_theme(self) -> None:
        t = self._get_theme()
        self.configure(bg=t["bg"])
        for w in self._iter_widgets(self):
            self._apply_theme_to_widget(w, t)
        self.console.tag_configure("warning", foreground=t["warning"])
        self.console.tag_configure("error", foreground=t["error"])
        self.console.tag_configure("ok", foreground=t["accent"])
        for menu in self._option_menus:
            menu["menu"].configure(bg=t["panel"], fg=t["fg"], activebackground=t["button_bg"])

    def _apply_theme_to_widget(self, widget, t):
        in_frame = isinstance(widget.master, tk.LabelFrame)
        bg = t["panel"] if in_frame else t["bg"]
        if isinstance(widget, tk.LabelFrame):
            widget.configure(bg=t["panel"], fg=t["fg"])
        elif isinstance(widget, tk.Label):
            widget.configure(bg=bg, fg=t["fg"])
        elif isinstance(widget, (tk.Entry, tk.Text)):
            widget.configure(bg=t["entry_bg"], fg=t["fg"], insertbackground=t["fg"])
        elif isinstance(widget, tk.Checkbutton):
            widget.configure(bg=bg, fg=t["fg"], activebackground=bg, activeforeground=t["fg"], selectcolor=bg)
        elif isinstance(widget, (tk.Button, tk.Menubutton)):
            widget.configure(bg=t["button_bg"], fg=t["fg"], activebackground=t["panel"], activeforeground=t["fg"])

    def _log(self, msg: str) -> None:
        tag = None
        if msg.startswith("Warning:"):
            tag = "warning"
        elif msg.startswith("Error:") or msg.startswith("Exception:"):
            tag = "error"
        elif msg == "Done.":
            tag = "ok"
        self.console.insert("end", msg + "\n", tag)
        self.console.see("end")

    def _check(self) -> None:
        path = self.input_var.get().strip()
        if not path:
            self._log("Error: select a song file first.")
            return
        try:
            cfg = load_config(self.config_var.get().strip())
        except (OSError, ValueError, TypeError) as exc:
            self._log(f"Error: cannot load config ({exc}).")
            return
        try:
            song = compile_file(path, cfg["max_text_size"])
        except AtmError as exc:
            self.status_var.set("Load error")
            self._log(f"Error: {exc}")
            return
        self.status_var.set(song.name or os.path.basename(path))
        self._log(
            f"{song.track_count} tracks, stream {len(song.stream)} bytes, "
            f"image {len(song.image)} bytes"
        )
        self._log("Done.")

    def _run(self) -> None:
        input_path = self.input_var.get().strip()
        output_path = self.output_var.get().strip()

        if not input_path or not output_path:
            self._log("Error: input and output are required.")
            return

        cmd = [sys.executable, "-m", "atm_txt.cli", input_path, output_path]
        cmd += ["--format", self.format_var.get()]
        label = self.label_var.get().strip()
        if label:
            cmd += ["--label", label]
        config = self.config_var.get().strip()
        if config:
            cmd += ["--config", config]
        if self.summary_var.get():
            cmd.append("--summary")

        self._log("Running: " + " ".join(cmd))

        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as exc:
            self._log(f"Exception: {exc}")
            return
        for stream in (result.stdout, result.stderr):
            for line in stream.strip().splitlines():
                self._log(line)
        if result.returncode == 0:
            self.status_var.set("Compiled")
            self._log("Done.")
        else:
            self.status_var.set("Load error")
            self._log(f"Failed (code {result.returncode}).")


def main() -> int:
    app = App()
    app.mainloop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
