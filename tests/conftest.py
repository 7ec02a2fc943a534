"""Shared fixtures: a small API bundle and an extension file with a generated block."""

from pathlib import Path

import pytest


BUNDLE = """\
// === sypnex-api-core.js ===
/**
 * SypnexAPI - Main API class for user applications
 * @class
 */
class SypnexAPI {
    /**
     * Create a new SypnexAPI instance
     * @param {string} appId - Unique identifier for the application
     */
    constructor(appId, helpers = {}) {
        this.appId = appId;
        this.init();
    }

    /**
     * Initialize the SypnexAPI instance
     * @async
     */
    async init() {
        try {
            if (typeof this.getAppSetting === 'function') {
                this.initialized = true;
            }
        } catch (error) {
            console.error('SypnexAPI initialization error:', error);
        }
    }

    /**
     * @private
     */
    async _defaultGetAppSetting(key, defaultValue = null) {
        return defaultValue;
    }

    getAppId() {
        return this.appId;
    }
}

// === sypnex-api-socket.js ===
Object.assign(SypnexAPI.prototype, {
    /**
     * Send a message through the socket
     * @param {string} event - Event name
     * @param {object} [data={}] - Payload
     */
    sendMessage(event, data = {}, room = null) {
        if (!this.socket) {
            return false;
        }
        this.socket.emit(event, data);
        return true;
    },

    disconnectSocket() {
        this.socket.disconnect();
    }
});
"""

BUNDLE_METHOD_NAMES = ["init", "sendMessage", "getAppId", "disconnectSocket"]

EXTENSION_HEAD = "import * as vscode from 'vscode';\n\n"

EXTENSION_BLOCK = """\
// Sypnex API method definitions (auto-generated)
const sypnexApiMethods = [
\t{
\t\tname: 'old',
\t\tsignature: 'old(): any',
\t\tdescription: 'Old method',
\t\tisAsync: false
\t}
];"""

EXTENSION_TAIL = """

export function activate(context: vscode.ExtensionContext) {
\tconst items = [];
\tconsole.log('Sypnex API extension is now active!');
}
"""

EXTENSION = EXTENSION_HEAD + EXTENSION_BLOCK + EXTENSION_TAIL


@pytest.fixture
def bundle_path(tmp_path: Path) -> Path:
    path = tmp_path / "sypnex-api.js"
    path.write_text(BUNDLE, encoding="utf-8")
    return path


@pytest.fixture
def extension_path(tmp_path: Path) -> Path:
    path = tmp_path / "src" / "extension.ts"
    path.parent.mkdir()
    path.write_text(EXTENSION, encoding="utf-8")
    return path
