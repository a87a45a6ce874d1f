"""
Web application for the Roller Coaster Launch Simulation

Interactive dashboard to run launch-speed sweeps and compare the rides.
"""

from typing import Any, Dict, List

import dash
from dash import dcc, html, Input, Output, State
from dash.exceptions import PreventUpdate
import plotly.express as px
import plotly.graph_objs as go

from coaster import Phase, TrackProfile, run_launch_sweep
from coaster.params import validate_gravity


# Initialize Dash app
app = dash.Dash(__name__)
app.title = "Roller Coaster Launch Simulation"

# Define app layout
app.layout = html.Div([
    html.Div([
        html.H1("Roller Coaster Launch Simulation",
                style={'textAlign': 'center', 'marginBottom': '30px'}),

        html.Div([
            html.Div([
                html.Label("Initial Speeds (m/s, comma-separated):",
                           style={'fontWeight': 'bold', 'marginBottom': '5px'}),
                dcc.Input(
                    id='speeds-input',
                    type='text',
                    value='0.5,2,5,10',
                    style={'width': '100%', 'padding': '8px'}
                ),
            ], style={'width': '30%', 'display': 'inline-block', 'marginRight': '20px'}),

            html.Div([
                html.Label("Gravity (m/s²):",
                           style={'fontWeight': 'bold', 'marginBottom': '5px'}),
                dcc.Input(
                    id='gravity-input',
                    type='number',
                    value=9.81,
                    min=0.1,
                    max=100.0,
                    step=0.01,
                    style={'width': '100%', 'padding': '8px'}
                ),
            ], style={'width': '20%', 'display': 'inline-block', 'marginRight': '20px'}),

            html.Div([
                html.Label("Time Step (s):",
                           style={'fontWeight': 'bold', 'marginBottom': '5px'}),
                dcc.Input(
                    id='dt-input',
                    type='number',
                    value=0.01,
                    min=0.001,
                    max=0.1,
                    step=0.001,
                    style={'width': '100%', 'padding': '8px'}
                ),
            ], style={'width': '20%', 'display': 'inline-block', 'marginRight': '20px'}),

            html.Button('Run Simulation', id='run-button',
                        style={'width': '20%', 'padding': '10px', 'fontSize': '16px',
                               'backgroundColor': '#1e40af', 'color': 'white',
                               'border': 'none', 'borderRadius': '5px', 'cursor': 'pointer'})
        ], style={'marginBottom': '30px', 'padding': '20px', 'backgroundColor': '#f5f5f5',
                  'borderRadius': '10px'}),

        html.Div(id='status-message', style={'marginBottom': '20px', 'fontSize': '14px'}),

        dcc.Loading(
            id="loading",
            type="default",
            children=[
                html.Div(id='results-container')
            ]
        )
    ], style={'maxWidth': '1400px', 'margin': '0 auto', 'padding': '20px'})
])


@app.callback(
    [Output("results-container", "children"), Output("status-message", "children")],
    [Input("run-button", "n_clicks")],
    [State("speeds-input", "value"), State("gravity-input", "value"), State("dt-input", "value")],
)
def update_results(
    n_clicks: int | None, speeds_str: str, gravity: float, dt: float
) -> tuple[Any, Any]:
    """Run the sweep and update results"""
    if n_clicks is None:
        raise PreventUpdate

    try:
        speeds = sorted({float(s.strip()) for s in speeds_str.split(",") if s.strip()})
        if not speeds:
            return [], html.Div("Error: Enter at least one initial speed.", style={"color": "red"})

        validate_gravity(gravity, 1e9)

        if dt is None or dt <= 0 or dt > 0.1:
            return [], html.Div(
                "Error: Time step must be between 0.001 and 0.1 seconds.",
                style={"color": "red"},
            )

        results = run_launch_sweep(speeds, gravity=gravity, dt=dt)

        status_msg = html.Div(
            f"Simulation complete! Rode {len(speeds)} launch speeds.",
            style={"color": "green"},
        )

        return create_results_layout(results, speeds), status_msg

    except ValueError as e:
        return [], html.Div(f"Error: {e}", style={"color": "red"})


def create_results_layout(
    results: Dict[float, Dict[str, Any]], speeds: List[float]
) -> html.Div:
    """Create the results visualization layout"""
    colors = px.colors.qualitative.Set1

    # 1. Track profile with every ride's path
    fig1 = go.Figure()
    track_x, track_y = TrackProfile().sample()
    fig1.add_trace(
        go.Scatter(
            x=track_x,
            y=track_y,
            mode="lines",
            name="Track",
            line=dict(color="rgb(60, 60, 60)", width=4),
        )
    )
    for i, v0 in enumerate(speeds):
        state = results[v0]["state"]
        fig1.add_trace(
            go.Scatter(
                x=state[:, 0],
                y=state[:, 1],
                mode="lines",
                name=f"{v0} m/s",
                line=dict(color=colors[i % len(colors)], width=2, dash="dot"),
                hovertemplate=f"v0: {v0} m/s<br>x: %{{x:.2f}}m<br>y: %{{y:.2f}}m<extra></extra>",
            )
        )

    fig1.update_layout(
        title="Track and Flight Paths",
        xaxis_title="x (m)",
        yaxis_title="Height (m)",
        hovermode="closest",
        height=450,
        template="plotly_white",
    )

    # 2. G-force on the track
    fig2 = go.Figure()
    for i, v0 in enumerate(speeds):
        t = results[v0]["time"]
        state = results[v0]["state"]
        on_track = results[v0]["phases"] == Phase.ON_TRACK.value
        fig2.add_trace(
            go.Scatter(
                x=t[on_track],
                y=state[on_track, 5],
                mode="lines",
                name=f"{v0} m/s",
                line=dict(color=colors[i % len(colors)], width=2),
                hovertemplate=f"v0: {v0} m/s<br>Time: %{{x:.2f}}s<br>G-force: %{{y:.2f}} Gs<extra></extra>",
            )
        )

    fig2.update_layout(
        title="G-Force on the Track",
        xaxis_title="Time (s)",
        yaxis_title="G-Force (Gs)",
        hovermode="closest",
        height=400,
        template="plotly_white",
    )

    # 3. Speed over the whole ride
    fig3 = go.Figure()
    for i, v0 in enumerate(speeds):
        t = results[v0]["time"]
        speed_kph = results[v0]["state"][:, 4] * 3.6
        fig3.add_trace(
            go.Scatter(
                x=t,
                y=speed_kph,
                mode="lines",
                name=f"{v0} m/s",
                line=dict(color=colors[i % len(colors)], width=2),
                hovertemplate=f"v0: {v0} m/s<br>Time: %{{x:.2f}}s<br>Speed: %{{y:.1f}} km/h<extra></extra>",
            )
        )

    fig3.update_layout(
        title="Speed Over Time",
        xaxis_title="Time (s)",
        yaxis_title="Speed (km/h)",
        hovermode="closest",
        height=400,
        template="plotly_white",
    )

    # 4. Landing distance
    speed_labels = [f"{v0} m/s" for v0 in speeds]
    landing = [results[v0]["analysis"]["landing_x"] or 0.0 for v0 in speeds]
    colors_bar = [
        "red" if results[v0]["analysis"]["high_g"] else "green" for v0 in speeds
    ]

    fig4 = go.Figure()
    fig4.add_trace(
        go.Bar(
            x=speed_labels,
            y=landing,
            marker_color=colors_bar,
            text=[f"{d:.2f}m" for d in landing],
            textposition="outside",
            hovertemplate="v0: %{x}<br>Landing x: %{y:.2f}m<extra></extra>",
        )
    )

    fig4.update_layout(
        title="Landing Position by Initial Speed",
        xaxis_title="Initial Speed",
        yaxis_title="Landing x (m)",
        height=400,
        template="plotly_white",
    )

    # 5. Peak G-force
    max_gs = [results[v0]["analysis"]["max_g"] for v0 in speeds]

    fig5 = go.Figure()
    fig5.add_trace(
        go.Bar(
            x=speed_labels,
            y=max_gs,
            marker_color=colors_bar,
            text=[f"{g:.2f} Gs" for g in max_gs],
            textposition="outside",
            hovertemplate="v0: %{x}<br>Max G: %{y:.2f} Gs<extra></extra>",
        )
    )

    fig5.update_layout(
        title="Peak G-Force by Initial Speed",
        xaxis_title="Initial Speed",
        yaxis_title="G-Force (Gs)",
        height=400,
        template="plotly_white",
    )

    # Summary table
    table_rows = [
        html.Tr([
            html.Th("Initial Speed (m/s)"),
            html.Th("Max G"),
            html.Th("Min G"),
            html.Th("Max Speed (km/h)"),
            html.Th("Flight Time (s)"),
            html.Th("x(t), y(t)"),
            html.Th("y(x)"),
        ])
    ]

    for v0 in speeds:
        analysis = results[v0]["analysis"]
        equation = results[v0]["equation"]
        g_color = "red" if analysis["high_g"] else "green"
        table_rows.append(
            html.Tr([
                html.Td(v0),
                html.Td(f"{analysis['max_g']:.2f}", style={"color": g_color, "fontWeight": "bold"}),
                html.Td(f"{analysis['min_g']:.2f}"),
                html.Td(f"{analysis['max_speed_kph']:.1f}"),
                html.Td(f"{analysis['flight_time']:.2f}"),
                html.Td(equation.parametric_text() if equation else "-"),
                html.Td(equation.explicit_text() if equation else "-"),
            ])
        )

    return html.Div([
        html.H2("Simulation Results", style={"marginTop": "30px", "marginBottom": "20px"}),
        html.Div([
            html.H3("Summary Table", style={"marginBottom": "15px"}),
            html.Table(
                table_rows,
                style={
                    "width": "100%",
                    "borderCollapse": "collapse",
                    "marginBottom": "30px",
                    "fontSize": "14px",
                },
            ),
        ], style={"marginBottom": "30px"}),
        html.Div([
            html.Div([dcc.Graph(figure=fig1)], style={"marginBottom": "30px"}),
            html.Div([dcc.Graph(figure=fig2)], style={"marginBottom": "30px"}),
            html.Div([dcc.Graph(figure=fig3)], style={"marginBottom": "30px"}),
            html.Div([
                html.Div(
                    [dcc.Graph(figure=fig4)],
                    style={"width": "48%", "display": "inline-block", "marginRight": "2%"},
                ),
                html.Div(
                    [dcc.Graph(figure=fig5)],
                    style={"width": "48%", "display": "inline-block"},
                ),
            ], style={"marginBottom": "30px"}),
        ]),
    ])


if __name__ == "__main__":
    app.run(debug=True, port=8050)
