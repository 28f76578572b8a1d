import os
from PIL import Image

# Bounding box for preview images (fits inside, keeps aspect ratio)
THUMB_SIZE = (320, 160)
THUMB_QUALITY = 85

def _flatten(img: Image.Image) -> Image.Image:
    """
    Return an RGB version of img.
    Transparent areas are composited over white so the preview keeps its look as JPEG.
    """
    has_alpha = img.mode in ("RGBA", "LA") or ("transparency" in img.info)
    if not has_alpha:
        return img.convert("RGB")
    rgba = img.convert("RGBA")
    bg = Image.new("RGB", rgba.size, (255, 255, 255))
    bg.paste(rgba, mask=rgba.split()[3])
    return bg

def make_thumbnail(src, out_path: str, size=THUMB_SIZE) -> str:
    """
    Render a JPEG preview of the image at `src` (path or binary file object) into out_path.
    Returns the path written.
    """
    base_out_dir = os.path.dirname(out_path)
    if base_out_dir and not os.path.exists(base_out_dir):
        os.makedirs(base_out_dir, exist_ok=True)

    try:
        img = Image.open(src)
        img.load()
    except Exception as e:
        raise RuntimeError(f"Unable to open image {getattr(src, 'name', src)}: {e}")

    thumb = _flatten(img)
    thumb.thumbnail(size)
    thumb.save(out_path, "JPEG", quality=THUMB_QUALITY, optimize=True)
    return out_path
