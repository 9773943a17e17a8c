# Services package

from .folder_tree import FolderHierarchy, build_folder_tree
from .tag_reconciler import TagReconciler, TagDelta, normalize_tag_names, reconcile
from .bookmark_query import BookmarkQuery, bookmark_view
from .bookmark_service import BookmarkService, validate_url
from .tag_service import TagService
from .metadata_scraper import MetadataFetcher, parse_metadata

__all__ = [
    "FolderHierarchy",
    "build_folder_tree",
    "TagReconciler",
    "TagDelta",
    "normalize_tag_names",
    "reconcile",
    "BookmarkQuery",
    "bookmark_view",
    "BookmarkService",
    "validate_url",
    "TagService",
    "MetadataFetcher",
    "parse_metadata",
]
