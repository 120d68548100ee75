# Tabler Icons (webfont), разметка для Label.set_markup

# Параметры
font_family: str = "tabler-icons"
font_weight: str = "normal"

span: str = f"<span font-family='{font_family}' font-weight='{font_weight}'>"

# Громкость
vol_off: str = "&#xf1c3;"
vol_medium: str = "&#xeb4f;"
vol_high: str = "&#xeb51;"

# Bluetooth-устройства вывода
bluetooth_connected: str = "&#xecea;"
bluetooth_off: str = "&#xeceb;"
bluetooth: str = "&#xea37;"

# Применяем span ко всем иконкам
for _name, _value in list(globals().items()):
    if _name.startswith("_") or _name in ("font_family", "font_weight", "span"):
        continue
    if isinstance(_value, str):
        globals()[_name] = f"{span}{_value}</span>"


def volume_markup(glyph: str, kind: str = "speaker") -> str:
    """Разметка иконки по ключу глифа ("muted"/"low"/"high") и типу устройства."""
    if kind == "bluetooth":
        table = {"muted": bluetooth_off, "low": bluetooth, "high": bluetooth_connected}
    else:
        table = {"muted": vol_off, "low": vol_medium, "high": vol_high}
    return table.get(glyph, table["high"])
