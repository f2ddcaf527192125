"""Centralized brand configuration for user-facing copy."""

BRAND_NAME = "MindWell"
BRAND_APP_DESCRIPTION = "Admin back-office API for assessments and wellness content"
