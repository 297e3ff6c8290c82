"""Konfigurationsmanager: Laden, Speichern und Validieren der Engine-Config.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich import box
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.schema import EngineConfig

console = Console()
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTAR-AUFBAU ───

_YAML_HEADER = f"""\
# ============================================
# Gruppen-Engine: Konfiguration
# Version: 1.0
# Erstellt: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "scheduling": (
        "Termine",
        "Erlaubte Wochentage, Mindestdauer und Uhrzeit-Raster.\n"
        "Pro Wochentag ist höchstens ein Termin je Gruppe erlaubt.",
    ),
    "pricing": (
        "Preise",
        "Monatsabos: Betrag × ceil(Lektionen / lectures_per_month).",
    ),
    "listing": (
        "Listen",
        None,
    ),
    "storage": (
        "Speicher",
        None,
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "engine_config.yaml"

    def first_run_check(self) -> bool:
        """Gibt True zurück wenn noch keine Config existiert (Erstaufruf)."""
        return not self.DEFAULT_CONFIG.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> EngineConfig:
        """Lade Config aus YAML. Validiert automatisch via Pydantic."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'python main.py config init' aus."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return EngineConfig.model_validate(dict(raw or {}))
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Pydantic-Fehler: {e}"
            ) from e

    def load_or_default(self, path: Optional[Path] = None) -> EngineConfig:
        """Wie load(), fällt aber ohne Datei auf die Default-Config zurück."""
        target = path or self.DEFAULT_CONFIG
        if not target.exists():
            from config.defaults import default_engine_config
            return default_engine_config()
        return self.load(target)

    # ─── Speichern ───

    def save(self, config: EngineConfig, path: Optional[Path] = None) -> None:
        """Speichere Config als YAML mit Abschnitts-Kommentaren."""
        target = path or self.DEFAULT_CONFIG
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")

    def _build_commented_yaml(self, config: EngineConfig) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )

        if "scheduling" in cm:
            sched = CommentedMap(cm["scheduling"])
            sched.yaml_add_eol_comment("Minuten", "min_session_minutes")
            cm["scheduling"] = sched

        return cm

    # ─── Anzeige ───

    def print_config(self, config: EngineConfig) -> None:
        """Gibt die Konfiguration als Rich-Tabelle aus."""
        table = Table(title=f"Konfiguration: {config.school_name}", box=box.ROUNDED)
        table.add_column("Bereich", style="bold")
        table.add_column("Parameter")
        table.add_column("Wert")
        for section in ("scheduling", "pricing", "listing", "storage"):
            values = getattr(config, section).model_dump(mode="json")
            for key, value in values.items():
                if isinstance(value, list):
                    value = ", ".join(str(v) for v in value)
                table.add_row(section, key, str(value))
        console.print(table)
