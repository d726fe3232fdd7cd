import click
from planning_poker import create_app, socketio

app = create_app()


@click.command()
@click.option('--host', default=lambda: app.config['HOST'], show_default='HOST or 0.0.0.0')
@click.option('--port', default=lambda: app.config['PORT'], type=int, show_default='PORT or 8000')
@click.option('--debug', is_flag=True, help='Enable the Flask debugger and reloader.')
def serve(host, port, debug):
    """Run the planning poker server with websocket support."""
    socketio.run(app, host=host, port=port, debug=debug, allow_unsafe_werkzeug=True)


if __name__ == '__main__':
    serve()
