"""Infrastructure layer - storage backends and terminal stream handling."""
