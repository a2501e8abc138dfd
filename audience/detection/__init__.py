"""Detection module for audience signals and conversational requests.

Import directly from detection.detectors to avoid circular imports:
    from audience.detection.detectors import detect_gender
"""
