"""
Update checking and installation.

Modules:
    version: Semantic version parsing and comparison
    checker: Latest-release lookup and update detection
    install_dir: Ordered probes for the installation directory
    installer: Download, back up, replace and reinstall with rollback
    auto: Once-per-day background check and its pending notice
"""
