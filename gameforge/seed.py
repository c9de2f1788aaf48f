# gameforge/seed.py
"""Sample studio data shared by the in-memory and database stores.

Every call builds fresh model instances, so one store's rows are never
attached to another store's session.
"""

from datetime import timedelta
from typing import List

from .models import Asset, AssetBundle, Metrics, Project, User, default_settings, utcnow

DEFAULT_USERNAME = "alex.rodriguez"
# Placeholder, not a real hash: seeded accounts are reached through dev-login.
PLACEHOLDER_PASSWORD = "hashed_password"

_UNSPLASH = "https://images.unsplash.com/{}?ixlib=rb-4.0.3&auto=format&fit=crop&w={}&h={}"


def _photo(photo_id: str, w: int = 400, h: int = 300) -> str:
    return _UNSPLASH.format(photo_id, w, h)


def _days_ago(days: int):
    return utcnow() - timedelta(days=days)


def sample_users() -> List[User]:
    return [
        User(
            id="user-1",
            username=DEFAULT_USERNAME,
            password=PLACEHOLDER_PASSWORD,
            email="alex@gameforge.com",
            display_name="Alex Rodriguez",
            role="Lead Developer",
            avatar=_photo("photo-1507003211169-0a1dd7228f2d", 150, 150),
            banner=_photo("photo-1550745165-9bc0b252726f", 1200, 300),
            bio="Lead Developer with 8+ years experience in game development. "
            "Specializes in Unity and Unreal Engine.",
            job_title="Lead Game Developer",
            status="Working on new RPG project",
            location="San Francisco, CA",
            portfolio_link="https://alexrodriguez.dev",
            skills=["Unity", "C#", "Game Architecture", "Team Leadership"],
            current_project="Crossy Road Clone",
            availability="online",
            settings=default_settings(),
            created_at=_days_ago(300),
        ),
        User(
            id="user-2",
            username="sarah.chen",
            password=PLACEHOLDER_PASSWORD,
            email="sarah@gameforge.com",
            display_name="Sarah Chen",
            role="Game Designer",
            avatar=_photo("photo-1438761681033-6461ffad8d80", 150, 150),
            settings=default_settings(),
        ),
        User(
            id="user-3",
            username="james.wilson",
            password=PLACEHOLDER_PASSWORD,
            email="james@gameforge.com",
            display_name="James Wilson",
            role="3D Artist",
            avatar=_photo("photo-1500648767791-00dcc994a43e", 150, 150),
            settings=default_settings(),
        ),
    ]


# name, icon, status, engine, platform, owner, team, features, age in days
_PROJECTS = [
    ("Space Explorer VR", "🚀", "live", "unity", "vr", "user-1",
     ["user-1", "user-2", "user-3"],
     ["Full VR support with hand tracking", "Procedurally generated planets",
      "Realistic space physics simulation", "Multiplayer exploration mode"], 40),
    ("Fantasy Quest RPG", "⚔️", "in-progress", "unreal", "pc", "user-1",
     ["user-1", "user-2"],
     ["Character customization", "Open world exploration", "Dynamic quest system", "Skill trees"], 35),
    ("Racing Championship", "🏎️", "not-started", "unity", "pc", "user-2",
     ["user-2", "user-3"],
     ["Realistic physics", "Multiplayer racing", "Car customization"], 30),
    ("Puzzle Master 3D", "🧩", "in-progress", "godot", "mobile", "user-3",
     ["user-3", "user-2", "user-1"],
     ["3D puzzle mechanics", "Physics-based gameplay", "Level editor", "Hint system"], 25),
    ("Cosmic Adventure", "🌟", "live", "html5", "web", "user-1",
     ["user-1", "user-3"],
     ["Procedural generation", "Space exploration", "Resource management"], 20),
    ("Retro Arcade Collection", "🎮", "in-progress", "html5", "web", "user-2",
     ["user-2", "user-3", "user-1"],
     ["Classic arcade games", "Modern graphics", "Leaderboards"], 15),
    ("Console Warriors Fighting", "🥊", "live", "unreal", "console", "user-3",
     ["user-3", "user-1"],
     ["8 unique fighters", "Frame-perfect combat", "Online tournaments"], 10),
    ("City Builder Simulator", "🏙️", "in-progress", "custom", "pc", "user-1",
     ["user-1"],
     ["Economic simulation", "Traffic management", "Zoning system"], 5),
]


def sample_projects() -> List[Project]:
    projects = []
    for idx, (name, icon, status, engine, platform, owner, team, features, age) in enumerate(_PROJECTS, start=1):
        stamp = _days_ago(age)
        projects.append(
            Project(
                id=f"proj-{idx}",
                name=name,
                description=f"{name} by the GameForge studio team.",
                icon=icon,
                status=status,
                engine=engine,
                platform=platform,
                owner_id=owner,
                team_members=list(team),
                features=list(features),
                screenshots=[],
                last_updated=stamp,
                created_at=stamp,
            )
        )
    return projects


def sample_metrics() -> List[Metrics]:
    return [
        Metrics(
            id="metrics-1",
            user_id="user-1",
            active_projects=12,
            team_members=100,
            assets_created=847,
            games_published=23,
            revenue=12745000,
        )
    ]


# id, name, category, price, original price, tags, downloads, rating, reviews, size, format, age
_ASSETS = [
    ("asset-music-1", "Epic Fantasy Orchestra", "music", 2999, 3499,
     ["orchestral", "fantasy", "epic", "cinematic"], 8420, 480, 156, "12.5 MB", "MP3, WAV", 60),
    ("asset-music-2", "Cyberpunk Synthwave Pack", "music", 1999, None,
     ["synthwave", "cyberpunk", "electronic", "retro"], 5210, 450, 89, "45.2 MB", "MP3, OGG", 55),
    ("asset-music-3", "Peaceful Village Themes", "music", 799, None,
     ["acoustic", "peaceful", "village", "RPG"], 12500, 465, 203, "8.7 MB", "MP3", 50),
    ("asset-music-4", "Ambient Space Drones", "music", 1299, None,
     ["ambient", "space", "drones", "sci-fi"], 2890, 425, 67, "34.2 MB", "WAV", 45),
    ("asset-graphics-1", "Medieval Castle Tileset", "graphics", 1499, None,
     ["2D", "tileset", "medieval", "pixel-art"], 6730, 470, 142, "5.4 MB", "PNG", 58),
    ("asset-graphics-2", "Sci-Fi UI Elements", "graphics", 999, None,
     ["UI", "sci-fi", "HUD", "interface"], 4300, 440, 95, "18.1 MB", "PNG, PSD", 42),
    ("asset-graphics-3", "Hand-Painted Texture Pack", "graphics", 2499, 2999,
     ["textures", "hand-painted", "stylized", "3D"], 3120, 455, 78, "220 MB", "PNG", 38),
    ("asset-sounds-1", "Magic Spells SFX Collection", "sounds", 1799, None,
     ["magic", "spells", "fantasy", "SFX"], 5980, 460, 121, "64 MB", "WAV", 35),
    ("asset-sounds-2", "8-Bit Retro Sound Pack", "sounds", 599, None,
     ["8-bit", "retro", "chiptune", "arcade"], 9870, 475, 310, "4.2 MB", "WAV", 30),
    ("asset-sounds-3", "Horror Atmosphere Pack", "sounds", 1299, None,
     ["horror", "ambient", "creepy", "atmosphere"], 2210, 435, 54, "120 MB", "WAV", 25),
    ("asset-tools-1", "Level Design Blueprint System", "tools", 3999, None,
     ["level-design", "editor", "blueprints"], 1870, 465, 48, "32 MB", "Unity Package", 20),
    ("asset-tools-2", "Mobile Performance Optimizer", "tools", 1999, None,
     ["mobile", "performance", "profiling"], 2640, 450, 61, "3.1 MB", "Unity Package", 15),
    ("asset-scripts-1", "Advanced Dialogue System", "scripts", 2799, None,
     ["dialogue", "RPG", "narrative"], 3410, 470, 102, "2.8 MB", "Unity Package", 12),
    ("asset-scripts-2", "Inventory & Crafting System", "scripts", 3499, 4999,
     ["inventory", "crafting", "RPG"], 2980, 465, 88, "4.5 MB", "Unity Package", 8),
    ("asset-scripts-3", "FREE Basic Player Controller", "scripts", 0, None,
     ["controller", "free", "starter"], 25400, 420, 640, "0.6 MB", "Unity Package", 4),
]


def sample_assets() -> List[Asset]:
    assets = []
    for (asset_id, name, category, price, original, tags, downloads,
         rating, reviews, size, fmt, age) in _ASSETS:
        stamp = _days_ago(age)
        slug = asset_id.split("-", 1)[1]
        assets.append(
            Asset(
                id=asset_id,
                name=name,
                description=f"{name} for your next game.",
                category=category,
                price=price,
                original_price=original,
                thumbnail=_photo("photo-1493225457124-a3eb161ffa5f"),
                file_url=f"/assets/{category}/{slug}.zip",
                preview_url=f"/assets/previews/{slug}.mp3" if category in ("music", "sounds") else None,
                tags=list(tags),
                downloads=downloads,
                rating=rating,
                review_count=reviews,
                file_size=size,
                format=fmt,
                created_at=stamp,
                updated_at=stamp,
            )
        )
    return assets


# id, name, price, original price, discount, asset ids, downloads, rating, reviews, age
_BUNDLES = [
    ("bundle-1", "Complete RPG Audio Bundle", 4999, 7297, 31,
     ["asset-music-1", "asset-music-3", "asset-sounds-1"], 1540, 475, 98, 45),
    ("bundle-2", "Retro Game Starter Kit", 1999, 2597, 23,
     ["asset-sounds-2", "asset-graphics-1", "asset-scripts-3"], 2310, 460, 134, 30),
    ("bundle-3", "Mobile Game Development Kit", 3999, 5999, 33,
     ["asset-tools-2", "asset-graphics-2", "asset-music-4"], 890, 450, 67, 25),
    ("bundle-4", "Horror Game Atmosphere Bundle", 2999, None, 0,
     ["asset-sounds-3", "asset-music-4"], 1120, 440, 78, 40),
]


def sample_bundles() -> List[AssetBundle]:
    bundles = []
    for (bundle_id, name, price, original, discount, asset_ids,
         downloads, rating, reviews, age) in _BUNDLES:
        stamp = _days_ago(age)
        bundles.append(
            AssetBundle(
                id=bundle_id,
                name=name,
                description=f"{name}: hand-picked assets at a bundle price.",
                price=price,
                original_price=original,
                discount=discount,
                thumbnail=_photo("photo-1509248961158-e54f6934749c"),
                asset_ids=list(asset_ids),
                downloads=downloads,
                rating=rating,
                review_count=reviews,
                created_at=stamp,
                updated_at=stamp,
            )
        )
    return bundles


def sample_rows() -> list:
    """All seed rows, parents before children."""
    return [
        *sample_users(),
        *sample_projects(),
        *sample_metrics(),
        *sample_assets(),
        *sample_bundles(),
    ]
