import argparse
import os
import time
import sqlite3
import re

from PIL import Image, ImageDraw, ImageFont

from database import get_db
from stock import resolve_image_path

IMAGE_DIR = os.path.join('assets', 'images')

# (product_num, description, price, stock_level)
CATALOGUE = [
    ("0001", "40 inch LED HD TV", 269.00, 90),
    ("0002", "DAB Radio", 29.99, 20),
    ("0003", "Toaster", 19.99, 33),
    ("0004", "Watch", 29.99, 10),
    ("0005", "Digital Camera", 89.99, 17),
    ("0006", "MP3 player", 7.99, 15),
    ("0007", "32Gb USB2 drive", 6.99, 1),
    ("0008", "Bluetooth Speaker", 24.50, 0),
    ("0009", "Kettle", 15.75, 12),
]


def commit_with_retry(conn, retries=6, initial_delay=0.5):
    """Attempt to commit, retrying on `sqlite3.OperationalError: database is locked`.

    Retries use exponential backoff (initial_delay * 2**attempt).
    """
    last_exc = None
    for attempt in range(retries):
        try:
            conn.commit()
            return
        except sqlite3.OperationalError as e:
            last_exc = e
            msg = str(e).lower()
            if 'locked' in msg or 'busy' in msg:
                delay = initial_delay * (2 ** attempt)
                time.sleep(delay)
                continue
            raise
    # If we exhausted retries, re-raise last exception
    raise last_exc


def _sanitize(name):
    # produce a simple filename-friendly key
    s = name.lower()
    s = re.sub(r"[^a-z0-9]+", "_", s)
    return s.strip("_")


def make_placeholder_image(product_num, description, image_dir=IMAGE_DIR):
    """Draw a plain labelled PNG for a product that ships without a picture."""
    os.makedirs(image_dir, exist_ok=True)
    path = os.path.join(image_dir, f"{product_num}_{_sanitize(description)}.png")
    if os.path.exists(path):
        return path

    img = Image.new('RGB', (160, 120), color=(245, 245, 245))
    draw = ImageDraw.Draw(img)
    draw.rectangle((0, 0, 159, 119), outline=(180, 180, 180), width=2)
    font = ImageFont.load_default()
    draw.text((10, 10), product_num, font=font, fill=(20, 20, 20))
    # wrap the description roughly to the tile width
    words = description.split()
    lines, cur = [], ""
    for w in words:
        if len(cur) + len(w) + 1 > 22:
            lines.append(cur)
            cur = w
        else:
            cur = f"{cur} {w}".strip()
    lines.append(cur)
    y = 40
    for ln in lines[:4]:
        draw.text((10, y), ln, font=font, fill=(60, 60, 60))
        y += 16
    img.save(path)
    return path


def seed(db=None, image_dir=IMAGE_DIR, with_images=True):
    db = db or get_db()
    conn = db.connect()
    try:
        c = conn.cursor()
        for product_num, description, price, stock_level in CATALOGUE:
            image_path = None
            if with_images:
                try:
                    image_path = make_placeholder_image(product_num, description, image_dir)
                except OSError as e:
                    print(f"Could not write image for {product_num}: {e}")
            c.execute(
                "INSERT OR IGNORE INTO stock (product_num, description, price, stock_level, image_path) "
                "VALUES (?,?,?,?,?)",
                (product_num, description, price, stock_level, image_path),
            )
        # Commit with retry to handle brief locks
        commit_with_retry(conn)
    finally:
        conn.close()

    print("Catalogue seeded.")


def verify_images(db=None):
    """List products and whether their `image_path` exists on disk.

    Prints lines: product number, description, image_path, status
    """
    db = db or get_db()
    conn = db.connect()
    try:
        rows = conn.execute("SELECT product_num, description, image_path FROM stock ORDER BY product_num").fetchall()
    finally:
        conn.close()

    print(f"{'No.':<6} {'Description':<30} {'Image Path':<60} {'Status'}")
    print('-' * 110)
    results = []
    for r in rows:
        ip = r['image_path'] or ''
        found = resolve_image_path(ip)
        status = 'OK' if found else 'MISSING'
        print(f"{r['product_num']:<6} {r['description']:<30} {(found or ip):<60} {status}")
        results.append((r['product_num'], status))
    return results


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument('--verify', action='store_true', help='Verify product image paths')
    parser.add_argument('--seed', action='store_true', help='Seed the catalogue')
    parser.add_argument('--no-images', action='store_true', help='Seed without generating images')
    args = parser.parse_args()

    if args.verify:
        verify_images()
    else:
        # Default to seeding when no flags provided
        seed(with_images=not args.no_images)
