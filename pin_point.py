"""
Pin Point - Interactive image pinning tool
Open an image (file or URL), pick a pin style, click to drop pins and save
the pinned image as a PNG.
Features: Contain-fit display, pin styles with labels, PNG export, gallery copy
"""

import argparse
import logging
import queue
import sys
import tkinter as tk
from tkinter import filedialog, ttk  # Convenience imports for dialogs and themed widgets

from PIL import Image, ImageTk

from pinpoint.config import PinPointConfig
from pinpoint.constants import LogMessages
from pinpoint.headless import build_exporter, export_image, parse_pin
from pinpoint.geometry import fit_container_size
from pinpoint.image_source import ImageSession, ImageSourceError, ImageSourceLoader
from pinpoint.logging_config import setup_logging
from pinpoint.models import Pin, PinStyle
from pinpoint.pin_store import PinStore
from pinpoint.render_surface import RenderSurface

# Pin styles offered in the toolbar: (button text, style)
PIN_STYLES = [
    ("Issue", PinStyle(color=(220, 50, 50), label="!", radius=11)),
    ("Note", PinStyle(color=(40, 110, 220), label="i", radius=11)),
    ("Done", PinStyle(color=(40, 160, 70), label="OK", radius=13)),
    ("Marker", PinStyle(color=(240, 180, 20), label="", radius=7)),
]


class TkScheduler:
    """Debounce scheduler running callbacks on the Tk event loop"""

    class _Handle:
        def __init__(self, root, after_id):
            self.root = root
            self.after_id = after_id

        def cancel(self):
            self.root.after_cancel(self.after_id)

    def __init__(self, root):
        self.root = root

    def schedule(self, delay, callback):
        return self._Handle(self.root, self.root.after(int(delay * 1000), callback))


class PinPointGUI:
    def __init__(self, root, config):
        self.root = root
        self.root.title("Pin Point")
        self.config = config

        # Results from worker threads are queued and applied on the Tk thread
        self.dispatch_queue = queue.Queue()

        self.loader = ImageSourceLoader(timeout=config.load_timeout)
        self.exporter = build_exporter(config)
        self.store = PinStore(on_pins_updated=self.on_pins_updated,
                              on_editing_complete=self.on_editing_complete,
                              editing_complete_delay=config.editing_complete_delay,
                              scheduler=TkScheduler(root))
        self.session = ImageSession(self.loader, self.store,
                                    dispatch=self.dispatch_queue.put,
                                    on_dimensions=self.on_dimensions_resolved,
                                    on_error=self.on_load_error)
        self.surface = RenderSurface()

        # PhotoImage reference (must keep reference to prevent garbage collection)
        self.photo = None

        self.setup_ui()

        self.root.protocol("WM_DELETE_WINDOW", self.on_close)
        self.root.after(50, self.process_dispatch_queue)

    def setup_ui(self):
        max_width, max_height = self.config.max_canvas_size

        # Toolbar
        toolbar = ttk.Frame(self.root, padding=5)
        toolbar.pack(side=tk.TOP, fill=tk.X)

        ttk.Button(toolbar, text="Open Image...", command=self.open_image).pack(side=tk.LEFT)
        ttk.Separator(toolbar, orient=tk.VERTICAL).pack(side=tk.LEFT, fill=tk.Y, padx=5)

        # Pin style selection (radio buttons share one variable)
        self.style_var = tk.StringVar(value="")
        for name, _ in PIN_STYLES:
            ttk.Radiobutton(toolbar, text=name, value=name, variable=self.style_var,
                            command=self.on_style_selected).pack(side=tk.LEFT)

        ttk.Separator(toolbar, orient=tk.VERTICAL).pack(side=tk.LEFT, fill=tk.Y, padx=5)
        ttk.Button(toolbar, text="Clear Pins", command=self.clear_pins).pack(side=tk.LEFT)

        # Save controls
        save_frame = ttk.Frame(self.root, padding=5)
        save_frame.pack(side=tk.TOP, fill=tk.X)

        ttk.Label(save_frame, text="Name:").pack(side=tk.LEFT)
        self.name_var = tk.StringVar(value="")
        ttk.Entry(save_frame, textvariable=self.name_var, width=24).pack(side=tk.LEFT, padx=5)

        self.gallery_var = tk.BooleanVar(value=self.config.save_to_gallery)
        ttk.Checkbutton(save_frame, text="Also save to gallery",
                        variable=self.gallery_var).pack(side=tk.LEFT, padx=5)

        self.save_btn = ttk.Button(save_frame, text="Save Image", command=self.save_image,
                                   state=tk.DISABLED)
        self.save_btn.pack(side=tk.LEFT, padx=5)

        # Canvas sized to the image once it is known
        self.canvas = tk.Canvas(self.root, width=max_width, height=max_height,
                                bg="#404040", highlightthickness=0)
        self.canvas.pack(side=tk.TOP, padx=5, pady=5)
        self.canvas.bind("<Button-1>", self.on_canvas_click)

        # Status bar
        self.status_label = ttk.Label(self.root, text="Open an image to start.",
                                      relief=tk.SUNKEN, anchor=tk.W, padding=3)
        self.status_label.pack(side=tk.BOTTOM, fill=tk.X)

    def set_status(self, text):
        self.status_label.config(text=text)

    def process_dispatch_queue(self):
        """Run callbacks queued by worker threads"""
        while True:
            try:
                callback = self.dispatch_queue.get_nowait()
            except queue.Empty:
                break
            try:
                callback()
            except Exception:
                # Keep polling, later loads must still be applied
                logging.exception("Error handling a queued result")
        self.root.after(50, self.process_dispatch_queue)

    def open_image(self):
        file_path = filedialog.askopenfilename(
            title="Select Image",
            filetypes=[("Image files", "*.jpg *.jpeg *.png *.bmp *.heic *.heif"), ("All files", "*.*")]
        )

        if file_path:
            self.load_image_from_source(file_path)

    def load_image_from_source(self, source):
        """Load an image from a file path or URL"""
        future = self.session.open(source)
        generation = self.session.generation

        # Reset view until the new image arrives
        self.style_var.set("")
        self.surface.set_image(None)
        self.canvas.delete("all")
        self.photo = None
        self.save_btn.config(state=tk.DISABLED)
        self.set_status(f"Loading {source}...")

        # Pixels are loaded after the dimensions, on a worker thread
        future.add_done_callback(
            lambda f: self.load_pixels(generation, source, f))

    def load_pixels(self, generation, source, dimensions_future):
        """Decode the image once its dimensions resolved (worker thread)"""
        if dimensions_future.cancelled() or dimensions_future.exception() is not None:
            return

        try:
            image = self.loader.load_image(source)
        except ImageSourceError as e:
            logging.error(f"{LogMessages.ERROR_BUILDING_IMAGE}{e}")
            return
        self.dispatch_queue.put(lambda: self.on_pixels_loaded(generation, image))

    def on_dimensions_resolved(self, source, dimensions):
        width, height = fit_container_size(dimensions.width, dimensions.height,
                                           self.config.max_canvas_size)
        self.surface.resize(width, height)
        self.canvas.config(width=width, height=height)
        self.set_status(f"Image loaded ({dimensions.width:g}x{dimensions.height:g}). "
                        f"Pick a pin style and click to add pins.")
        self.display_on_canvas()

    def on_pixels_loaded(self, generation, image):
        if not self.session.is_current(generation):
            return
        self.surface.set_image(image)
        self.save_btn.config(state=tk.NORMAL)
        self.display_on_canvas()

    def on_load_error(self, source, error):
        self.set_status(f"Error: Could not load image - {error}")

    def on_style_selected(self):
        name = self.style_var.get()
        for style_name, style in PIN_STYLES:
            if style_name == name:
                # Only the visual of the template is used
                self.store.selected_style = Pin(position=(0.0, 0.0), visual=style)
                self.set_status(f"{name} pins selected. Click on the image to add.")
                return

    def on_canvas_click(self, event):
        if not self.surface.is_mounted:
            return

        if self.store.selected_style is None:
            self.set_status("Select a pin style first.")
            return

        pin = self.store.add_pin(event.x, event.y, self.surface.container_size)
        if pin is not None:
            self.set_status(f"Pin {len(self.store)} added at ({pin.x:.0f}, {pin.y:.0f}).")

    def on_pins_updated(self, pins):
        self.surface.set_pins(pins)
        self.display_on_canvas()

    def on_editing_complete(self):
        self.set_status(f"{len(self.store)} pin(s) placed. Save when ready.")

    def clear_pins(self):
        self.store.clear()
        self.set_status("All pins cleared.")

    def display_on_canvas(self):
        canvas_image = self.surface.render(1.0)
        if canvas_image is None:
            return

        # Convert to PhotoImage
        img_pil = Image.fromarray(canvas_image)
        self.photo = ImageTk.PhotoImage(image=img_pil)

        # Update canvas
        self.canvas.delete("all")
        self.canvas.create_image(0, 0, anchor=tk.NW, image=self.photo)

    def save_image(self):
        if not self.surface.is_mounted:
            return

        if len(self.store) == 0:
            self.set_status("Add some pins before saving!")
            return

        custom_name = self.name_var.get().strip() or None
        result = self.exporter.save_image(self.surface,
                                          skip_save_to_gallery=not self.gallery_var.get(),
                                          custom_name=custom_name)
        if result.is_success:
            self.set_status(f"{result.message}: {result.file_path}")
        elif result.file_path:
            self.set_status(f"{result.message} (local copy: {result.file_path})")
        else:
            self.set_status(f"Error: {result.message}")

    def on_close(self):
        self.session.dispose()
        self.loader.shutdown()
        self.root.destroy()


def build_parser():
    parser = argparse.ArgumentParser(description='Pin Point - Interactive image pinning tool')
    parser.add_argument('image', nargs='?', help='Image file or URL to load on startup')
    parser.add_argument('--output-dir', help='Directory for saved images (default: temp directory)')
    parser.add_argument('--gallery-dir', help='Gallery directory (default: ~/Pictures/PinPoint)')
    parser.add_argument('--save-to-gallery', action='store_true',
                        help='Also copy saved images to the gallery')
    parser.add_argument('--pixel-ratio', type=float,
                        help='Oversampling factor for saved images (default: 2.5)')
    parser.add_argument('--timeout', type=float,
                        help='Seconds to wait for an image to load (default: 30)')
    parser.add_argument('--export', action='store_true',
                        help='Save the image with --pin pins and exit without opening a window')
    parser.add_argument('--pin', action='append', default=[], metavar='X,Y[,LABEL]',
                        help='Pin at image pixel coordinates (with --export, repeatable)')
    parser.add_argument('--name', help='Output file name without extension (with --export)')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = PinPointConfig.from_args(args)
        pin_specs = [parse_pin(text) for text in args.pin]
    except ValueError as e:
        parser.error(str(e))

    if args.export:
        if not args.image:
            parser.error("--export needs an image")
        result = export_image(config, args.image, pin_specs, custom_name=args.name)
        print(result.message if result.file_path is None else f"{result.message}: {result.file_path}")
        return 0 if result.is_success else 1

    root = tk.Tk()
    app = PinPointGUI(root, config)

    # Load image if provided via command line
    if args.image:
        # Ensure UI is fully initialized before loading image
        root.update_idletasks()
        app.load_image_from_source(args.image)

    root.mainloop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
