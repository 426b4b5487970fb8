from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Centralizes the glyph vocabulary understood by the structure parser, the
default names used by the tree editor, and application versioning.
"""

from typing import FrozenSet

CURRENT_CONFIG_VERSION = "1.0.0"
APP_NAME = "TreeForge"

# -----------------------------------------------------------------------------
# TREE GLYPH VOCABULARY
# -----------------------------------------------------------------------------

# Branch-tee and corner-elbow connectors (Unicode light/heavy and ASCII)
CONNECTOR_GLYPHS: FrozenSet[str] = frozenset({"├", "└", "┣", "┗", "+", "`"})

# Vertical continuation glyphs
VERTICAL_GLYPHS: FrozenSet[str] = frozenset({"│", "┃", "|"})

# Horizontal dashes trailing a connector
DASH_GLYPHS: FrozenSet[str] = frozenset({"─", "━", "-"})

COMMENT_MARKER = "#"
DIRECTORY_MARKER = "/"
FILE_MARKER = "**"

# Columns per nesting level in plain indented input
INDENT_WIDTH = 2

# Columns per nesting level of a blank run inside a glyph prefix
GLYPH_UNIT_WIDTH = 4

# -----------------------------------------------------------------------------
# RENDERING
# -----------------------------------------------------------------------------

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE_PREFIX = "│   "
SPACE_PREFIX = "    "

SERIALIZE_STYLES = ("indent", "tree")

# -----------------------------------------------------------------------------
# EDITOR DEFAULTS
# -----------------------------------------------------------------------------

DEFAULT_NODE_NAME = "New Node"
DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_WORKERS = 1

EXAMPLE_STRUCTURE = """mongodb-runner/
├── src/                      # Frontend Next.js code
│   ├── app/                  # Next.js app directory
│   │   ├── api/              # API routes
│   │   │   ├── connection/   # Connection management endpoints
│   │   │   ├── execute/      # Query execution endpoint
│   │   │   └── stored-connections/ # Connection storage endpoints
│   │   ├── globals.css       # Global styles
│   │   ├── layout.tsx        # Root layout
│   │   └── page.tsx          # Home page
│   ├── components/           # React components
│   │   ├── ConnectionManager.tsx
│   │   ├── ConnectionSelector.tsx
│   │   ├── JsonDetailView.tsx**
│   │   └── QueryEditor.tsx**
├── backend/                  # Backend Express.js server
│   ├── src/
│   │   ├── app.ts            # Express app setup
│   │   ├── routes/           # API routes
│   │   │   ├── connections.ts**
│   │   │   └── index.ts**
└── README.md**"""
