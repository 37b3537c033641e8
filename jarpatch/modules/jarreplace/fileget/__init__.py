from .maven_downloader import MavenDownloader

__all__ = ["MavenDownloader"]
