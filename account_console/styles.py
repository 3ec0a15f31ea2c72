"""CSS styles for the account console."""

CSS = """
Screen {
    background: #1e1e2e;
}

Header {
    background: #181825;
    text-style: bold;
}

Footer {
    background: #181825;
}

Button {
    background: transparent;
    color: #3b82f6;
    border: none;
    height: 3;
    min-height: 3;
    min-width: 12;
    padding: 0 1;
    margin: 0;
    content-align: center middle;
}

Button:hover {
    background: #3b82f6;
    color: #ffffff;
    text-style: underline;
}

Button:focus {
    background: #3b82f6;
    color: #ffffff;
    text-style: bold underline reverse;
}

Button:disabled {
    color: #585b70;
}

Horizontal {
    height: auto;
    margin: 0 0 1 0;
}

Label {
    color: #e2e8f0;
}

Input {
    background: #181825;
    border: solid #3b82f6;
    color: #e2e8f0;
    padding: 0 1;
    min-height: 1;
}

Static {
    color: #a6adc8;
}

DataTable {
    background: #1e1e2e;
    border: solid #3b82f6;
}

#actionbar-title, #accounts-title {
    text-style: bold;
    color: #67e8f9;
    margin-bottom: 1;
    border-bottom: solid #22d3ee;
}

#account-header {
    padding: 0 1;
    background: #181825;
    border: solid #3b82f6;
    margin: 0 0 1 0;
}

#account-header.disabled {
    border: solid #585b70;
    color: #585b70;
}

#account-empty {
    color: #f59e0b;
    padding: 1 2;
}

#transactions {
    padding: 0 1;
}

ModalScreen {
    align: center middle;
}

ModalScreen > Vertical {
    width: 72;
    height: auto;
    border: solid #22d3ee;
    background: #181825;
    padding: 1 2;
}

.dialog-title {
    text-style: bold;
    color: #67e8f9;
    margin-bottom: 1;
}

.warning {
    color: #f59e0b;
}

.hint {
    color: #94a3b8;
}
"""
