"""Reference documentation loader for the Growsoft Lua API docs."""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)

INDEX_FILE = 'index.json'
DIGEST_LENGTH = 500


class DocsLoader:
    """Loads and caches documentation index and markdown files."""

    def __init__(self, data_dir=None):
        """Initialize the docs loader."""
        if data_dir is None:
            # Assume we're running from project root
            self.data_dir = Path(__file__).parent.parent / 'docs_data'
        else:
            self.data_dir = Path(data_dir)

        self._index = None
        self._contents = {}

    def load_index(self):
        """Load the documentation index."""
        if self._index is None:
            file_path = self.data_dir / INDEX_FILE
            try:
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
            except (OSError, ValueError) as e:
                logger.error("Failed to load docs index %s: %s", file_path, e)
                return []
            if not isinstance(data, dict) or not isinstance(data.get('docs'), list):
                logger.error("Docs index %s has no 'docs' list", file_path)
                return []
            self._index = [doc for doc in data['docs'] if isinstance(doc, dict)]
        return self._index

    def list_docs(self, category=None):
        """Get document summaries, optionally filtered by category."""
        docs = self.load_index()
        if category and category.lower() != 'all':
            docs = [doc for doc in docs if (doc.get('category') or '').lower() == category.lower()]
        return [dict(doc) for doc in docs]

    def find_entry(self, path_or_id):
        """Find an index entry by its path or its id."""
        if not path_or_id:
            return None
        for doc in self.load_index():
            if path_or_id in (doc.get('path'), doc.get('id')):
                return doc
        return None

    def _resolve(self, relative_path):
        base = self.data_dir.resolve()
        file_path = (base / relative_path).resolve()
        # Reject anything that escapes the docs directory
        if base != file_path and base not in file_path.parents:
            return None
        return file_path

    def get_doc(self, path_or_id):
        """Get full content for a document, or None if it is unknown."""
        entry = self.find_entry(path_or_id)
        if entry is None:
            return None

        path = entry.get('path')
        if not isinstance(path, str) or not path:
            return None
        if path not in self._contents:
            file_path = self._resolve(path)
            if file_path is None or not file_path.is_file():
                logger.warning("Document file missing for %s", path)
                return None
            content = file_path.read_text(encoding='utf-8')
            modified = datetime.fromtimestamp(file_path.stat().st_mtime, tz=timezone.utc)
            self._contents[path] = {
                'title': entry.get('title') or 'Documentation',
                'content': content,
                'lastUpdated': entry.get('lastUpdated') or modified.date().isoformat(),
                'category': entry.get('category') or 'General'
            }
        return dict(self._contents[path])

    def docs_context(self, paths, limit=DIGEST_LENGTH):
        """Build a short markdown digest of several documents for prompts."""
        sections = []
        for path in paths:
            doc = self.get_doc(path)
            if doc is None:
                continue
            sections.append(f"## {doc['title']}\n{doc['content'][:limit]}...")
        return '\n\n'.join(sections)

    def validate_data(self):
        """Validate loaded data and return list of errors."""
        errors = []

        docs = self.load_index()
        if not docs:
            errors.append("No documents loaded")

        ids = [str(doc.get('id')) for doc in docs]
        if len(ids) != len(set(ids)):
            errors.append("Duplicate document IDs found")

        for doc in docs:
            if not isinstance(doc.get('path'), str) or not doc['path']:
                errors.append(f"Document {doc.get('id')} has no path")
                continue
            file_path = self._resolve(doc['path'])
            if file_path is None or not file_path.is_file():
                errors.append(f"Missing file for document {doc.get('id')}: {doc['path']}")

        return errors


# Loader instances, one per docs directory
_docs_loaders = {}


def get_docs_loader(data_dir=None):
    """Get or create the docs loader for a directory."""
    key = str(data_dir) if data_dir is not None else None
    if key not in _docs_loaders:
        _docs_loaders[key] = DocsLoader(data_dir)
    return _docs_loaders[key]
