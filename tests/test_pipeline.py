"""
Tests for image sources, the album and the end-to-end pipeline.
"""
import pytest
from PIL import Image

from fourcut.album import PhotoAlbum
from fourcut.canvas import CanvasSpec, CollageResult
from fourcut.errors import PrematureRender
from fourcut.fourcut_pipeline import FourCutPipeline
from fourcut.sources import FileImageSource, StaticImageSource

import main
from tests.conftest import BLUE, GREEN, MAGENTA, RED, YELLOW


@pytest.fixture
def photo_files(tmp_path, base_images):
    paths = []
    for i, image in enumerate(base_images):
        path = tmp_path / f"shot{i}.png"
        image.save(path)
        paths.append(path)
    return paths


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "canvas:\n"
        "  width: 600\n"
        "  height: 700\n"
        "  frame_gap: 10\n"
        "caption:\n"
        "  text: ''\n"
        "album:\n"
        f"  directory: {(tmp_path / 'album').as_posix()}\n",
        encoding="utf-8",
    )
    return path


class TestFileImageSource:
    """Tests for FileImageSource."""

    def test_decodes_in_order(self, photo_files):
        images = FileImageSource(photo_files).produce()
        assert [img.getpixel((0, 0)) for img in images] == [RED, GREEN, BLUE, YELLOW]

    def test_skips_undecodable_and_missing(self, tmp_path, photo_files):
        garbage = tmp_path / "broken.jpg"
        garbage.write_bytes(b"not an image")
        source = FileImageSource([photo_files[0], garbage, tmp_path / "missing.png"])
        assert len(source.produce()) == 1

    def test_applies_exif_orientation(self, tmp_path):
        image = Image.new("RGB", (40, 20), RED)
        exif = Image.Exif()
        exif[0x0112] = 6  # rotate 90° on display
        path = tmp_path / "rotated.jpg"
        image.save(path, exif=exif)
        (decoded,) = FileImageSource([path]).produce()
        assert decoded.size == (20, 40)


class TestStaticImageSource:
    def test_returns_copy_of_list(self, base_images):
        source = StaticImageSource(base_images)
        produced = source.produce()
        produced.clear()
        assert len(source.produce()) == 4


class TestPhotoAlbum:
    """Tests for PhotoAlbum."""

    def test_save_timestamped_without_overwrite(self, tmp_path, base_images):
        from fourcut.renderer import CollageRenderer
        result = CollageRenderer().render(base_images)
        album = PhotoAlbum(tmp_path / "album")
        first = album.save(result)
        second = album.save(result)
        assert first != second
        assert first.exists() and second.exists()
        assert second.name.startswith("fourcut_")

    def test_explicit_path(self, tmp_path, base_images):
        from fourcut.renderer import CollageRenderer
        result = CollageRenderer().render(base_images)
        out = PhotoAlbum(tmp_path).save(result, tmp_path / "nested" / "collage.png")
        with Image.open(out) as saved:
            assert saved.size == (600, 700)


class TestFourCutPipeline:
    """Tests for FourCutPipeline."""

    def test_from_config_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            FourCutPipeline.from_config(str(tmp_path / "nope.yaml"))

    def test_from_config(self, config_file):
        pipe = FourCutPipeline.from_config(str(config_file))
        assert pipe.canvas == CanvasSpec(caption="")

    def test_run_saves_collage(self, config_file, photo_files, solid):
        pipe = FourCutPipeline.from_config(str(config_file))
        output = pipe.run(
            FileImageSource(photo_files),
            overlay_sources={1: StaticImageSource([solid(MAGENTA)])},
        )
        assert output["saved"] is True
        assert isinstance(output["collage"], CollageResult)
        with Image.open(output["collage_path"]) as saved:
            assert saved.size == (600, 700)
            assert saved.convert("RGB").getpixel((450, 175)) == MAGENTA
            assert saved.convert("RGB").getpixel((150, 175)) == RED

    def test_run_with_too_few_photos(self, config_file, photo_files, tmp_path):
        pipe = FourCutPipeline.from_config(str(config_file))
        with pytest.raises(PrematureRender):
            pipe.run(FileImageSource(photo_files[:3]))
        assert not (tmp_path / "album").exists()

    def test_extra_photos_ignored(self, base_images, solid, tmp_path):
        pipe = FourCutPipeline({"album": {"directory": str(tmp_path)}, "caption": {"text": ""}})
        output = pipe.run(
            StaticImageSource(base_images + [solid(MAGENTA)]),
            output_path=str(tmp_path / "out.png"),
        )
        assert output["collage_path"] == str(tmp_path / "out.png")
        assert output["collage"].image.getpixel((450, 500)) == YELLOW

    def test_empty_overlay_source_leaves_slot_empty(self, base_images, tmp_path):
        pipe = FourCutPipeline({"album": {"directory": str(tmp_path)}, "caption": {"text": ""}})
        output = pipe.run(StaticImageSource(base_images), {0: StaticImageSource([])})
        assert output["collage"].image.getpixel((150, 175)) == RED

    def test_saved_path_belongs_to_its_session(self, base_images, tmp_path):
        pipe = FourCutPipeline({"album": {"directory": str(tmp_path)}, "caption": {"text": ""}})
        done = pipe.new_session()
        pending = pipe.new_session()
        pending.on_base_image_captured(base_images[0])
        for image in base_images:
            done.on_base_image_captured(image)

        assert done.saved_path is not None and done.saved_path.exists()
        assert pending.saved_path is None

    def test_reset_clears_saved_path(self, base_images, tmp_path):
        pipe = FourCutPipeline({"album": {"directory": str(tmp_path)}, "caption": {"text": ""}})
        session = pipe.new_session()
        for image in base_images:
            session.on_base_image_captured(image)
        session.reset()
        assert session.saved_path is None


class TestCli:
    """Tests for the main.py entry point."""

    def test_parse_overlay(self):
        args = main.parse_args(["a", "b", "c", "d", "--overlay", "2=x.png", "--overlay", "0=y.png"])
        assert args.images == ["a", "b", "c", "d"]
        assert dict(args.overlay) == {2: "x.png", 0: "y.png"}

    @pytest.mark.parametrize("bad", ["4=x.png", "x.png", "a=x.png", "1="])
    def test_rejects_bad_overlay(self, bad):
        with pytest.raises(SystemExit):
            main.parse_args(["a", "b", "c", "d", "--overlay", bad])

    def test_end_to_end(self, config_file, photo_files, tmp_path):
        out = tmp_path / "collage.png"
        code = main.main([*map(str, photo_files), "-c", str(config_file),
                          "-o", str(out), "--caption", "Hi"])
        assert code == 0
        assert out.exists()

    def test_missing_image(self, config_file, photo_files, tmp_path):
        code = main.main([*map(str, photo_files[:3]), str(tmp_path / "missing.png"),
                          "-c", str(config_file)])
        assert code == 1

    def test_undecodable_image(self, config_file, photo_files, tmp_path):
        broken = tmp_path / "broken.png"
        broken.write_bytes(b"garbage")
        code = main.main([*map(str, photo_files[:3]), str(broken), "-c", str(config_file),
                          "-o", str(tmp_path / "never.png")])
        assert code == 1
        assert not (tmp_path / "never.png").exists()

    def test_unwritable_output(self, config_file, photo_files, tmp_path):
        blocker = tmp_path / "file.txt"
        blocker.write_text("not a directory", encoding="utf-8")
        code = main.main([*map(str, photo_files), "-c", str(config_file),
                          "-o", str(blocker / "out.png")])
        assert code == 1
