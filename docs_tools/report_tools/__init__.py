"""Allure attachment helpers and result post-processing."""
