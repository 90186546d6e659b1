import click

from .services.assets.errors import AssetError
from .services.assets.storage import CLOUDINARY, LOCAL


def register_commands(app):
    @app.cli.command("check-env")
    @click.option("--ping/--no-ping", default=False,
                  help="Also make a round trip to Cloudinary.")
    def check_env(ping):
        """Check Cloudinary credentials and local storage."""
        credentials = app.config["CLOUDINARY_CREDENTIALS"]
        masked = credentials.masked()
        labels = [
            ("CLOUDINARY_CLOUD_NAME", credentials.cloud_name, masked["cloudName"]),
            ("CLOUDINARY_API_KEY", credentials.api_key, masked["apiKey"]),
            ("CLOUDINARY_API_SECRET", credentials.api_secret, masked["apiSecret"]),
        ]
        for name, value, shown in labels:
            status = f"Set ({shown})" if value else "Missing"
            click.echo(f"{name}: {status}")

        backends = app.extensions["asset_storage"]
        local = backends[LOCAL].probe()
        click.echo(f"Local assets dir: {local['assetsDir']} "
                   f"(exists={local['exists']}, writable={local['writable']})")

        if not credentials.configured:
            click.echo("Some Cloudinary environment variables are missing.")
            raise SystemExit(1)

        click.echo("All Cloudinary environment variables are set.")
        if ping:
            try:
                result = backends[CLOUDINARY].probe()
            except AssetError as e:
                click.echo(f"Cloudinary ping failed: {e.message}")
                raise SystemExit(1)
            click.echo(f"Cloudinary ping: {result['ping'].get('status', 'ok')}")
