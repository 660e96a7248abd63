# Minimal byte strings carrying real image signatures; enough for content sniffing.
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + b"\x00" * 32
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00" + b"\x00" * 32
GIF_BYTES = b"GIF89a" + b"\x00" * 32

# 14-byte file header + 40-byte BITMAPINFOHEADER + one 4-byte pixel row.
BMP_BYTES = (
    b"BM"
    + (58).to_bytes(4, "little")
    + b"\x00" * 4
    + (54).to_bytes(4, "little")
    + (40).to_bytes(4, "little")
    + b"\x00" * 36
    + b"\x00" * 4
)
