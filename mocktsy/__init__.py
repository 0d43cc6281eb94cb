"""
Mockup build-plan and render engine for clipart collections.

Modules:
- catalog: declarative layouts for the 26 mockups
- allocator: frame image assignment with cross-mockup uniqueness
- palette: six-color palette extraction
- plan: build plan assembly and JSON serialization
- images: image reference loading (paths, URLs, data URIs)
- render: compositing frames, text and logo onto a raster
- exporter: ZIP / PDF packaging
- core: job loading and pipeline orchestration
"""
