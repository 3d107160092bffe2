from pathlib import Path

DEFAULT_BREWFILE = Path.home() / '.Brewfile'
LINT_CONFIG_NAME = '.dotkit.yaml'

BREW = 'brew'
COLUMN_WIDTH = 35

STEP_SUMMARY_TITLE = '### 📝 Lint／Format Summary'
