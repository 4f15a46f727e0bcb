"""Utility helpers for the kubesetup application."""
