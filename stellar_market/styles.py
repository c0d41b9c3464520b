"""CSS styles for the Stellar Market application."""

CSS = """
Screen {
    background: #1e1e2e;
}

Header {
    background: #181825;
    text-style: bold;
    padding: 0 1;
    height: 3;
}

#connection-status {
    background: #181825;
    color: #a6adc8;
    padding: 0 2;
    height: 1;
    text-align: right;
    dock: top;
}

#status-line {
    background: #181825;
    color: #fbbf24;
    padding: 0 2;
    height: 1;
}

Footer {
    background: #181825;
    height: 2;
}

Tabs {
    background: #181825;
    height: 3;
}

Tab {
    background: #1e1e2e;
    text-style: bold;
    padding: 0 1;
    min-height: 1;
}

Tab.-active {
    background: #22d3ee;
    color: #0f172a;
    text-style: bold reverse;
}

DataTable {
    background: #1e1e2e;
    border: solid #3b82f6;
}

Button {
    background: transparent;
    color: #3b82f6;
    border: none;
    height: 3;
    min-height: 3;
    min-width: 16;
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

Button.-primary {
    background: #22d3ee;
    color: #0f172a;
    border: solid #22d3ee;
    text-style: bold;
}

Button.-primary:hover {
    background: #67e8f9;
}

Horizontal {
    height: auto;
    margin: 0 0 1 0;
    padding: 0 1;
}

#market-tab, #history-tab, #connect-panel {
    padding: 1 2;
}

#wallet-row > Button {
    width: 20;
    min-width: 20;
}

#market-columns {
    height: 1fr;
}

#products-panel, #cart-panel {
    width: 1fr;
    padding: 0 1;
}

#products-table, #cart-table {
    min-height: 6;
    margin-bottom: 1;
}

#add-to-cart-button {
    border: solid #22c55e;
    color: #22c55e;
    text-style: bold;
}

#remove-from-cart-button {
    border: solid #f43f5e;
    color: #f43f5e;
    text-style: bold;
}

#cart-total {
    color: #fbbf24;
    text-style: bold;
    margin-bottom: 1;
}

#history-status {
    min-height: 1;
    margin-bottom: 1;
}

#market-title, #cart-title, #history-title, #confirm-title, #detail-title,
#wallet-selector-title, #secret-title, #result-title {
    text-style: bold;
    color: #67e8f9;
    margin-bottom: 1;
    border-bottom: solid #22d3ee;
    padding-bottom: 0;
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

.hidden {
    display: none;
}

ModalScreen {
    align: center middle;
}

#tx-hash-display {
    background: #181825;
    border: solid #3b82f6;
    padding: 0 1;
    margin: 0 0 1 0;
    color: #e2e8f0;
}
"""
