"""Generate .env.example from the Settings defaults, leaving secrets blank."""
import sys
from pathlib import Path

root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(root))

from backend.config import Settings  # noqa: E402

dest = root / '.env.example'

lines = ['# Generated by scripts/generate_env_template.py']
for name, field in Settings.model_fields.items():
    default = field.default
    if default is None or name.endswith(('_key', '_secret', '_key_id')):
        value = ''
    elif isinstance(default, list):
        value = ','.join(str(item) for item in default)
    else:
        value = str(default)
    if '\n' in value or ' ' in value:
        value = f'"{value}"'
    lines.append(f"{name.upper()}={value}")

dest.write_text('\n'.join(lines) + '\n')
print(f'Wrote template to {dest}')
