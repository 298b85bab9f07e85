"""
wkpdf - HTML to PDF through an external wkhtmltopdf renderer

Writes HTML to a scratch file, runs the renderer with an argument vector
built from configuration, classifies the result, and delivers the PDF bytes.

Architecture:
- Rendering Context: configuration, scratch files, renderer invocation, result classification
- Delivery Context: download / string / embedded / save output modes
"""

__version__ = "0.1.0"
