'''
Example blowdown simulation of a small nitrous oxide / paraffin hybrid motor.

Subscripts:
    ox - Oxidizer
    cc - Combustion chamber
    th - Nozzle throat
    amb - Atmospheric/ambient condition
'''
import hybridsim as hs
import hybridsim.plot
import numpy as np

'''Combustion properties - approximate N2O / paraffin equilibrium values, in the form obtained from NASA CEA or ProPEP 3'''
OF = [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 10.0, 12.0, 15.0]
p = [1e4, 1e6, 1e7]                                                                                 #Pressure (Pa)

T_10bar = np.array([1400, 2300, 2900, 3150, 3250, 3250, 3200, 3100, 2950, 2800, 2600])               #Flame temperature (K) at 10 bar
T = np.column_stack([T_10bar * 0.95, T_10bar, T_10bar * 1.03])                                         #Dissociation lowers the flame temperature at low pressure

gamma_OF = np.array([1.25, 1.20, 1.17, 1.16, 1.16, 1.17, 1.18, 1.19, 1.20, 1.21, 1.22])
M_OF = np.array([18.0, 21.0, 23.0, 24.5, 25.5, 26.3, 27.0, 27.5, 28.2, 28.7, 29.2])                #Molar mass (kg/kmol)

gamma = np.column_stack([gamma_OF] * 3)
M = np.column_stack([M_OF] * 3)
cp = gamma / (gamma - 1) * 8314.4598 / M                                                           #Frozen isobaric specific heat capacity (J/kg/K)
rho = np.array(p)[np.newaxis, :] * M / (8314.4598 * T)                                             #Ideal gas density (kg/m^3)

equilibrium_table = hs.EquilibriumTable(OF = OF, p = p, T = T, rho = rho, cp = cp, gamma = gamma, M = M)

'''Oxidizer properties - from the ESDU correlations. Use tabulated NIST data instead for better accuracy.'''
saturation_table = hs.nitrous.saturation_table()

'''Motor parameters'''
config = hs.MotorConfig(dt = 0.01,                  #Time step (s)
                        t_max = 15.0,               #Maximum burn time (s)
                        V_tank = 0.01,              #Tank volume (m^3)
                        p_tank_init = 45e5,         #Tank pressure (Pa)
                        m_ox_init = 6.0,            #Oxidizer mass (kg)
                        p_feed = 2e5,               #Feed system pressure drop (Pa)
                        n_inj = 10,                 #Number of injector holes
                        d_inj = 1.5e-3,             #Injector hole diameter (m)
                        Cd_inj = 0.65,              #Injector discharge coefficient
                        d_grain = 0.1,              #Fuel grain outer diameter (m)
                        d_port_init = 0.04,         #Initial port diameter (m)
                        L_grain = 0.5,              #Fuel grain length (m)
                        rho_fuel = 900.0,           #Paraffin density (kg/m^3)
                        a = 9e-5,                   #Regression rate coefficient (SI)
                        n = 0.62,                   #Regression rate exponent
                        T_cc_init = 293.0,          #Initial chamber temperature (K)
                        p_cc_init = 1e5,            #Initial chamber pressure (Pa)
                        zeta_d = 1.0,               #Discharge correction efficiency
                        zeta_cstar = 0.95,          #Characteristic velocity efficiency
                        zeta_CF = 0.98,             #Thrust coefficient efficiency
                        A_th = 6e-4,                #Throat area (m^2)
                        area_ratio = 5.0,           #Nozzle area ratio
                        p_amb = 1e5,                #Ambient pressure (Pa)
                        nozzle_angle_correction = 0.983)    #15 degree conical nozzle

'''Run the simulation'''
motor = hs.MotorSimulation(config, equilibrium_table, saturation_table)
results = motor.run(verbose = True)

for key, value in results["summary"].items():
    print(f"{key} = {value}")

np.savetxt("thrust_curve.csv", motor.thrust_curve(), delimiter = ",", header = "time (s), thrust (N), propellant mass (kg)")

'''Plot the results'''
hybridsim.plot.plot_thrust(results)
hybridsim.plot.plot_pressures(results)
hybridsim.plot.plot_tank(results)
hybridsim.plot.plot_mass_flows(results)
hybridsim.plot.show()
