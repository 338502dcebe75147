"""Synthetic manifest generation for monorepo workspaces."""
