"""Receipt field extraction.

Conditions receipt photos for Tesseract OCR with OpenCV and turns the
noisy OCR text into a single amount and transaction date using an
ordered cascade of heuristics.
"""
