import os, time, uuid
from flask import current_app


def allowed_file(filename):
    return '.' in filename and filename.rsplit('.', 1)[1].lower() in current_app.config["ALLOWED_EXTENSIONS"]


def save_image(file, kind):
    """Store an uploaded image under ``UPLOAD_FOLDER/<kind>``.

    Returns the relative path ``uploads/<kind>/<name>``, or ``None`` when the
    file is missing or not an allowed image.
    """
    if not file or not file.filename or not allowed_file(file.filename):
        return None

    ext = file.filename.rsplit('.', 1)[1].lower()
    filename = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}.{ext}"
    folder = os.path.join(current_app.config["UPLOAD_FOLDER"], kind)
    os.makedirs(folder, exist_ok=True)
    file.save(os.path.join(folder, filename))
    return f"uploads/{kind}/{filename}"


def save_images(files, kind):
    """Save each file, skipping the ones that fail.

    A failed image is logged and skipped; rows already written are kept.
    """
    paths = []
    for file in files:
        if not file or not file.filename:
            continue
        try:
            path = save_image(file, kind)
        except OSError:
            current_app.logger.exception("Image upload failed: %s", file.filename)
            continue
        if path is None:
            current_app.logger.warning("Skipped image with unsupported type: %s", file.filename)
            continue
        paths.append(path)
    return paths
